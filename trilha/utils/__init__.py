"""
Utilitários da Trilha
=====================

Este módulo contém funções auxiliares e decoradores:
- decorators: Controle de permissões para rotas
- helpers: Upload, validação e formatação
- scoring: Cálculo da nota das tentativas
- recommendations: Perfil de desempenho e recomendações
"""

from .decorators import (
    anonymous_required,
    quiz_owner_required,
    is_safe_next
)

from .helpers import (
    allowed_file,
    save_uploaded_file,
    delete_file,
    format_datetime,
    format_time_ago,
    validate_email,
    validate_password,
    validate_quiz_data,
    validate_question_data
)

from .scoring import calculate_score
from .recommendations import PersonalizationEngine

__all__ = [
    # Decoradores de permissão
    'anonymous_required',
    'quiz_owner_required',
    'is_safe_next',

    # Funções auxiliares
    'allowed_file',
    'save_uploaded_file',
    'delete_file',
    'format_datetime',
    'format_time_ago',
    'validate_email',
    'validate_password',
    'validate_quiz_data',
    'validate_question_data',

    # Pontuação e recomendações
    'calculate_score',
    'PersonalizationEngine'
]
