"""
Modelo de Usuários - Trilha
===========================

Define a conta do usuário:
- Nome de exibição e email (único, usado no login)
- Senha armazenada apenas como hash com salt
- Estatísticas calculadas a partir das tentativas
"""

from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from trilha.extensions import db

# Hash de referência para emails desconhecidos: o login sempre calcula um hash
DUMMY_PASSWORD_HASH = generate_password_hash('trilha-senha-inexistente')


class User(UserMixin, db.Model):
    """
    Conta de usuário da Trilha
    Herda de UserMixin para compatibilidade com Flask-Login
    """

    __tablename__ = 'users'

    # Campos da tabela
    id = db.Column(db.Integer, primary_key=True)
    display_name = db.Column(db.String(80), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relacionamentos
    quizzes = db.relationship('Quiz', backref='creator', lazy=True, cascade='all, delete')
    attempts = db.relationship('Attempt', backref='user', lazy=True, cascade='all, delete',
                               order_by='desc(Attempt.completed_at)')

    def __init__(self, display_name, email, password=None, password_hash=None):
        """Inicializar nova conta"""
        self.display_name = display_name
        self.email = email.strip().lower()
        if password is not None:
            self.set_password(password)
        else:
            self.password_hash = password_hash

    def set_password(self, password):
        """Define nova senha usando hash seguro"""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Verifica se a senha fornecida está correta"""
        return check_password_hash(self.password_hash, password)

    @classmethod
    def find_by_email(cls, email):
        if not email:
            return None
        return cls.query.filter_by(email=email.strip().lower()).first()

    @classmethod
    def authenticate(cls, email, password):
        """
        Retorna a conta se email e senha conferem, senão None

        Email desconhecido também passa por check_password_hash, para que
        as duas falhas levem o mesmo tempo.
        """
        user = cls.find_by_email(email)
        if user is None:
            check_password_hash(DUMMY_PASSWORD_HASH, password)
            return None
        return user if user.check_password(password) else None

    def get_quiz_stats(self):
        """Retorna estatísticas das tentativas e dos quizzes criados"""
        scores = [attempt.score for attempt in self.attempts]

        return {
            'quizzes_played': len(scores),
            'average_score': round(sum(scores) / len(scores), 1) if scores else 0,
            'best_score': max(scores) if scores else 0,
            'total_questions_answered': sum(a.total_questions for a in self.attempts),
            'quizzes_created': len(self.quizzes)
        }

    def __repr__(self):
        return f'<User {self.email}>'
