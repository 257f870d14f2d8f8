"""
Modelos do Banco de Dados - Trilha
==================================

Este módulo contém todos os modelos (estruturas) do banco de dados:
- User: Contas de usuário
- Quiz: Quizzes criados pelos usuários
- Question / Option: Questões dos quizzes e suas alternativas
- Attempt / Answer: Tentativas realizadas e respostas dadas
"""

from .user import User
from .quiz import Quiz, DIFFICULTIES, DIFFICULTY_LABELS
from .question import Question, Option, QUESTION_KINDS, QUESTION_KIND_LABELS
from .attempt import Attempt, Answer

# Lista de todos os modelos disponíveis para import
__all__ = [
    'User',
    'Quiz',
    'Question',
    'Option',
    'Attempt',
    'Answer',
    'DIFFICULTIES',
    'DIFFICULTY_LABELS',
    'QUESTION_KINDS',
    'QUESTION_KIND_LABELS'
]
