"""
Google Sheets adapter.

Wraps the handful of Sheets v4 calls the attendance and user tabs need. Each
call is retried by the client library (exponential backoff on 429 and 5xx)
up to ``REMOTE_RETRIES`` times and reported as a RemoteResult.
"""
import json
import logging

from googleapiclient.errors import HttpError

from services.results import RemoteResult

logger = logging.getLogger(__name__)

SCOPES = ['https://www.googleapis.com/auth/spreadsheets']


class GoogleSheetsClient:

    def __init__(self, spreadsheet_id, credentials_info=None, credentials_file=None, num_retries=3):
        self.spreadsheet_id = spreadsheet_id
        self._credentials_info = credentials_info
        self._credentials_file = credentials_file
        self.num_retries = num_retries
        self._service = None

    @classmethod
    def from_config(cls, config):
        return cls(
            config.get('SPREADSHEET_ID'),
            credentials_info=config.get('GOOGLE_CREDENTIALS') or None,
            credentials_file=config.get('GOOGLE_APPLICATION_CREDENTIALS') or None,
            num_retries=config.get('REMOTE_RETRIES', 3),
        )

    @property
    def service(self):
        if self._service is None:
            from google.oauth2.service_account import Credentials
            from googleapiclient.discovery import build

            if self._credentials_info:
                info = self._credentials_info
                if isinstance(info, str):
                    info = json.loads(info)
                credentials = Credentials.from_service_account_info(info, scopes=SCOPES)
            elif self._credentials_file:
                credentials = Credentials.from_service_account_file(self._credentials_file, scopes=SCOPES)
            else:
                raise RuntimeError("Google Sheets is not configured. Set GOOGLE_CREDENTIALS "
                                   "or GOOGLE_APPLICATION_CREDENTIALS.")
            self._service = build('sheets', 'v4', credentials=credentials, cache_discovery=False)
        return self._service

    def _execute(self, operation, request_factory, extract=None):
        try:
            response = request_factory(self.service).execute(num_retries=self.num_retries)
        except HttpError as e:
            logger.error("Sheets %s failed: %s", operation, e)
            return RemoteResult.failure(operation, e)
        except (OSError, ValueError, RuntimeError) as e:
            # transport failures and credential problems
            logger.error("Sheets %s failed: %s", operation, e)
            return RemoteResult.failure(operation, e)
        return RemoteResult.success(operation, extract(response) if extract else response)

    def get_values(self, a1_range):
        return self._execute(
            f"read {a1_range}",
            lambda s: s.spreadsheets().values().get(spreadsheetId=self.spreadsheet_id, range=a1_range),
            lambda response: response.get('values', []),
        )

    def append_values(self, a1_range, rows):
        return self._execute(
            f"append {a1_range}",
            lambda s: s.spreadsheets().values().append(
                spreadsheetId=self.spreadsheet_id,
                range=a1_range,
                valueInputOption='RAW',
                body={'values': rows},
            ),
        )

    def update_values(self, a1_range, rows):
        return self._execute(
            f"update {a1_range}",
            lambda s: s.spreadsheets().values().update(
                spreadsheetId=self.spreadsheet_id,
                range=a1_range,
                valueInputOption='RAW',
                body={'values': rows},
            ),
        )

    def clear_values(self, a1_range):
        return self._execute(
            f"clear {a1_range}",
            lambda s: s.spreadsheets().values().clear(spreadsheetId=self.spreadsheet_id, range=a1_range, body={}),
        )

    def batch_update(self, requests):
        kinds = ', '.join(next(iter(r)) for r in requests)
        return self._execute(
            f"batchUpdate [{kinds}]",
            lambda s: s.spreadsheets().batchUpdate(spreadsheetId=self.spreadsheet_id, body={'requests': requests}),
        )

    def get_metadata(self):
        return self._execute(
            "read spreadsheet metadata",
            lambda s: s.spreadsheets().get(
                spreadsheetId=self.spreadsheet_id,
                fields='sheets(properties(sheetId,title))',
            ),
            lambda response: [
                {'title': sheet['properties']['title'], 'id': sheet['properties']['sheetId']}
                for sheet in response.get('sheets', [])
            ],
        )
