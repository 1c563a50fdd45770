from . import db


class StudentMarks(db.Model):
    """One subject result for one student in one exam"""

    __tablename__ = 'Student_Marks'

    id = db.Column(db.Integer, primary_key=True)
    rollNumber = db.Column(db.String(32), db.ForeignKey('Student-info.rollNumber'), nullable=False, index=True)
    subject = db.Column(db.String(120), nullable=False)
    marks = db.Column(db.Float, nullable=False)
    grade = db.Column(db.String(5), nullable=False, index=True)
    typeofexam = db.Column(db.String(60), nullable=False)

    student = db.relationship('Student', backref='marks')

    __table_args__ = (
        db.UniqueConstraint('rollNumber', 'subject', 'typeofexam', name='unique_student_subject_exam'),
    )

    def __repr__(self):
        return f"<StudentMarks {self.rollNumber} {self.subject} ({self.typeofexam}): {self.marks}>"

    def to_dict(self):
        return {
            'id': self.id,
            'rollNumber': self.rollNumber,
            'subject': self.subject,
            'marks': self.marks,
            'grade': self.grade,
            'typeofexam': self.typeofexam,
        }
