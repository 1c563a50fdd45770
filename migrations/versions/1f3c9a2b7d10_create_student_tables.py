"""create Student-info and Student_Marks

Revision ID: 1f3c9a2b7d10
Revises:
Create Date: 2026-10-19 10:12:31.402118

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1f3c9a2b7d10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'Student-info',
        sa.Column('rollNumber', sa.String(32), primary_key=True),
        sa.Column('firstName', sa.String(120), nullable=False),
        sa.Column('lastName', sa.String(120), nullable=True),
        sa.Column('gender', sa.String(20), nullable=True),
        sa.Column('dob', sa.String(20), nullable=True),
        sa.Column('address', sa.String(255), nullable=True),
        sa.Column('parentName', sa.String(120), nullable=True),
        sa.Column('parentEmail', sa.String(255), nullable=True),
        sa.Column('parentContact', sa.String(30), nullable=True),
        sa.Column('cast', sa.String(60), nullable=True),
        sa.Column('region', sa.String(120), nullable=True),
        sa.Column('yearOfAdmission', sa.String(4), nullable=False),
        sa.Column('feeStatus', sa.String(20), nullable=True),
    )
    op.create_index('ix_Student-info_firstName', 'Student-info', ['firstName'])
    op.create_index('ix_Student-info_lastName', 'Student-info', ['lastName'])
    op.create_index('ix_Student-info_yearOfAdmission', 'Student-info', ['yearOfAdmission'])
    op.create_index('ix_Student-info_feeStatus', 'Student-info', ['feeStatus'])

    op.create_table(
        'Student_Marks',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('rollNumber', sa.String(32), sa.ForeignKey('Student-info.rollNumber'), nullable=False),
        sa.Column('subject', sa.String(120), nullable=False),
        sa.Column('marks', sa.Float, nullable=False),
        sa.Column('grade', sa.String(5), nullable=False),
        sa.Column('typeofexam', sa.String(60), nullable=False),
        sa.UniqueConstraint('rollNumber', 'subject', 'typeofexam', name='unique_student_subject_exam'),
    )
    op.create_index('ix_Student_Marks_rollNumber', 'Student_Marks', ['rollNumber'])
    op.create_index('ix_Student_Marks_grade', 'Student_Marks', ['grade'])


def downgrade():
    op.drop_table('Student_Marks')
    op.drop_table('Student-info')
