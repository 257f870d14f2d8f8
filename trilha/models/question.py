"""
Modelo de Questões - Trilha
===========================

Define as questões dos quizzes e suas alternativas:
- Tipo de questão de um conjunto fechado
- Alternativas como registros próprios, com marcação de correta
- Sistema de ordenação
"""
from datetime import datetime

from trilha.extensions import db

QUESTION_KINDS = ('single_choice', 'true_false')

QUESTION_KIND_LABELS = {
    'single_choice': 'Múltipla escolha',
    'true_false': 'Verdadeiro ou falso'
}

# Limites de alternativas por tipo de questão
OPTION_LIMITS = {
    'single_choice': (2, 6),
    'true_false': (2, 2)
}


def is_valid_kind(value):
    return value in QUESTION_KINDS


class Question(db.Model):
    __tablename__ = 'questions'

    # Campos principais
    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey('quizzes.id'), nullable=False, index=True)
    prompt = db.Column(db.Text, nullable=False)
    kind = db.Column(db.String(20), nullable=False, default='single_choice')

    # Configurações
    order_index = db.Column(db.Integer, default=0)

    # Metadados
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    options = db.relationship('Option', backref='question', lazy=True, cascade='all, delete-orphan',
                              order_by='Option.order_index')
    # Respostas gravadas nunca são alteradas pela questão; saem junto com a tentativa
    answers = db.relationship('Answer', backref='question', lazy=True, passive_deletes='all')

    @property
    def kind_label(self):
        return QUESTION_KIND_LABELS.get(self.kind, 'Desconhecido')

    @property
    def correct_option(self):
        """Retorna a alternativa correta (ou None)"""
        for option in self.options:
            if option.is_correct:
                return option
        return None

    def find_option(self, option_id):
        """Busca uma alternativa pelo id, apenas entre as desta questão"""
        for option in self.options:
            if option.id == option_id:
                return option
        return None

    @staticmethod
    def get_next_order_index(quiz_id):
        """Retorna o próximo índice de ordenação para um quiz"""
        max_order = db.session.query(db.func.max(Question.order_index))\
                              .filter_by(quiz_id=quiz_id)\
                              .scalar()
        return (max_order if max_order is not None else -1) + 1

    def soft_delete(self):
        """Exclusão lógica: some do quiz, mas continua nas tentativas já feitas"""
        self.is_active = False

    def to_dict(self, include_answer=False):
        """Converte questão para dicionário (útil para JSON)"""
        data = {
            'id': self.id,
            'quiz_id': self.quiz_id,
            'prompt': self.prompt,
            'kind': self.kind,
            'order_index': self.order_index,
            'options': [{'id': o.id, 'text': o.text} for o in self.options]
        }
        if include_answer:
            correct = self.correct_option
            data['correct_option_id'] = correct.id if correct else None
        return data

    def __repr__(self):
        return f'<Question {self.id}: {self.prompt[:50]}...>'


class Option(db.Model):
    __tablename__ = 'options'

    id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(db.Integer, db.ForeignKey('questions.id'), nullable=False, index=True)
    text = db.Column(db.String(500), nullable=False)
    is_correct = db.Column(db.Boolean, default=False, nullable=False)
    order_index = db.Column(db.Integer, default=0)

    def __repr__(self):
        return f'<Option {self.id}{" *" if self.is_correct else ""}>'
