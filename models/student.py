from flask_sqlalchemy import SQLAlchemy
from email_validator import validate_email, EmailNotValidError

db = SQLAlchemy()


class Student(db.Model):
    """Registered student with contact details and fee status"""

    __tablename__ = 'Student-info'

    # Generated as S<yearOfAdmission><sequence>, e.g. S20240007
    rollNumber = db.Column(db.String(32), primary_key=True)

    firstName = db.Column(db.String(120), nullable=False, index=True)
    lastName = db.Column(db.String(120), nullable=True, index=True)
    gender = db.Column(db.String(20), nullable=True)
    dob = db.Column(db.String(20), nullable=True)
    address = db.Column(db.String(255), nullable=True)

    # Guardian
    parentName = db.Column(db.String(120), nullable=True)
    parentEmail = db.Column(db.String(255), nullable=True)
    parentContact = db.Column(db.String(30), nullable=True)

    cast = db.Column(db.String(60), nullable=True)
    region = db.Column(db.String(120), nullable=True)
    yearOfAdmission = db.Column(db.String(4), nullable=False, index=True)

    feeStatus = db.Column(db.String(20), nullable=True, index=True)

    def __repr__(self):
        return f"<Student {self.rollNumber} {self.firstName} {self.lastName or ''}>"

    def validate_email(self):
        """
        Normalize the guardian e-mail address using email_validator

        Raises:
            ValueError: If the address is set but malformed
        """
        if not self.parentEmail:
            return True
        try:
            valid = validate_email(self.parentEmail, check_deliverability=False)
            self.parentEmail = valid.normalized
            return True
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email address: {str(e)}")

    def to_dict(self):
        return {
            'rollNumber': self.rollNumber,
            'firstName': self.firstName,
            'lastName': self.lastName,
            'gender': self.gender,
            'dob': self.dob,
            'address': self.address,
            'parentName': self.parentName,
            'parentEmail': self.parentEmail,
            'parentContact': self.parentContact,
            'cast': self.cast,
            'region': self.region,
            'yearOfAdmission': self.yearOfAdmission,
            'feeStatus': self.feeStatus,
        }


class FeeStatus:
    """Allowed fee status values"""
    PAID = 'PAID'
    UNPAID = 'UNPAID'
    PARTIALLY_PAID = 'PARTIALLY PAID'

    CHOICES = [PAID, UNPAID, PARTIALLY_PAID]
