"""
Modelo de Quizzes - Trilha
==========================

Define a estrutura dos quizzes com:
- Nível de dificuldade de um conjunto fechado
- Questões ordenadas
- Estatísticas de desempenho a partir das tentativas
- Imagem de capa opcional
"""
from datetime import datetime
from sqlalchemy import desc, func

from trilha.extensions import db

# Níveis aceitos, do mais fácil para o mais difícil
DIFFICULTIES = ('beginner', 'intermediate', 'advanced')

DIFFICULTY_LABELS = {
    'beginner': 'Iniciante',
    'intermediate': 'Intermediário',
    'advanced': 'Avançado'
}


def is_valid_difficulty(value):
    return value in DIFFICULTIES


class Quiz(db.Model):
    __tablename__ = 'quizzes'

    # Campos principais
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    difficulty = db.Column(db.String(20), nullable=False, default='beginner', index=True)

    # Metadados
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Upload de imagem
    image_filename = db.Column(db.String(255))

    # Relacionamentos
    questions = db.relationship('Question', backref='quiz', lazy='dynamic', cascade='all, delete-orphan',
                                order_by='Question.order_index')
    attempts = db.relationship('Attempt', backref='quiz', lazy='dynamic', cascade='all, delete')

    @property
    def question_count(self):
        """Conta o número de questões ativas"""
        return self.active_questions().count()

    @property
    def difficulty_label(self):
        return DIFFICULTY_LABELS.get(self.difficulty, 'Desconhecido')

    def is_owned_by(self, user):
        return user is not None and user.is_authenticated and self.created_by == user.id

    def active_questions(self):
        return self.questions.filter_by(is_active=True)

    def get_questions_for_play(self):
        """Retorna questões ativas na ordem de criação"""
        return self.active_questions().all()

    def get_completion_stats(self):
        """Retorna estatísticas das tentativas do quiz"""
        from trilha.models.attempt import Attempt

        total, average, best = db.session.query(
            func.count(Attempt.id), func.avg(Attempt.score), func.max(Attempt.score)
        ).filter(Attempt.quiz_id == self.id).one()

        return {
            'total_attempts': total or 0,
            'average_score': round(average, 1) if average is not None else 0,
            'best_score': best or 0
        }

    def get_user_attempts(self, user):
        """Tentativas do usuário neste quiz, mais recentes primeiro"""
        from trilha.models.attempt import Attempt

        return self.attempts.filter_by(user_id=user.id).order_by(desc(Attempt.completed_at)).all()

    @staticmethod
    def get_recent_quizzes(limit=5):
        """Retorna quizzes mais recentes"""
        return Quiz.query.order_by(desc(Quiz.created_at), desc(Quiz.id)).limit(limit).all()

    def __repr__(self):
        return f'<Quiz {self.title}>'
