"""
Modelo de Tentativas - Trilha
=============================

Uma tentativa é uma passagem completa por um quiz, com a nota final
(0 a 100) e uma resposta registrada por questão. Não há edição depois
de gravada.
"""

from datetime import datetime

from trilha.extensions import db


class Attempt(db.Model):
    __tablename__ = 'attempts'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey('quizzes.id'), nullable=False, index=True)
    score = db.Column(db.Integer, nullable=False)  # 0 a 100
    correct_count = db.Column(db.Integer, nullable=False, default=0)
    total_questions = db.Column(db.Integer, nullable=False)
    time_spent = db.Column(db.Integer, nullable=True)  # Tempo em segundos
    completed_at = db.Column(db.DateTime, default=datetime.utcnow)

    answers = db.relationship('Answer', backref='attempt', lazy=True, cascade='all, delete-orphan')

    @property
    def grade_letter(self):
        """Retorna nota em letra baseada na pontuação"""
        if self.score >= 90:
            return 'A'
        elif self.score >= 80:
            return 'B'
        elif self.score >= 70:
            return 'C'
        elif self.score >= 60:
            return 'D'
        else:
            return 'F'

    @property
    def grade_color(self):
        """Retorna cor da nota"""
        colors = {
            'A': 'success',
            'B': 'info',
            'C': 'warning',
            'D': 'orange',
            'F': 'danger'
        }
        return colors.get(self.grade_letter, 'secondary')

    def get_time_display(self):
        """Retorna tempo formatado"""
        if self.time_spent is None:
            return "Não registrado"

        minutes = self.time_spent // 60
        seconds = self.time_spent % 60

        if minutes > 0:
            return f"{minutes}min {seconds}s"
        else:
            return f"{seconds}s"

    def to_dict(self):
        return {
            'id': self.id,
            'quiz_id': self.quiz_id,
            'score': self.score,
            'correct_count': self.correct_count,
            'total_questions': self.total_questions,
            'time_spent': self.time_spent,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None
        }

    def __repr__(self):
        return f'<Attempt {self.user_id}-{self.quiz_id}: {self.score}>'


class Answer(db.Model):
    __tablename__ = 'answers'

    id = db.Column(db.Integer, primary_key=True)
    attempt_id = db.Column(db.Integer, db.ForeignKey('attempts.id'), nullable=False, index=True)
    question_id = db.Column(db.Integer, db.ForeignKey('questions.id'), nullable=False)
    option_id = db.Column(db.Integer, db.ForeignKey('options.id', ondelete='SET NULL'), nullable=True)
    is_correct = db.Column(db.Boolean, nullable=False, default=False)

    option = db.relationship('Option')

    def __repr__(self):
        return f'<Answer {self.attempt_id}-{self.question_id}: {self.is_correct}>'
