"""
Decoradores de Permissão - Trilha
=================================

Decoradores para controlar acesso às rotas:
- anonymous_required: Apenas visitantes sem login (login, cadastro)
- quiz_owner_required: Apenas o autor do quiz
"""

from functools import wraps
from flask import redirect, url_for, flash, request
from flask_login import current_user

from trilha.models.quiz import Quiz


def anonymous_required(f):
    """
    Redireciona usuários já logados para o dashboard
    Uso: @anonymous_required
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if current_user.is_authenticated:
            return redirect(url_for('dashboard.index'))

        return f(*args, **kwargs)

    return decorated_function


def quiz_owner_required(f):
    """
    Decorador que exige que o usuário seja o autor do quiz
    Uso: @quiz_owner_required
    Nota: A função decorada deve receber quiz_id como parâmetro
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            flash('Você precisa fazer login para acessar esta página.', 'warning')
            return redirect(url_for('auth.login', next=request.path))

        quiz = Quiz.query.get_or_404(kwargs.get('quiz_id'))

        if not quiz.is_owned_by(current_user):
            flash('Você não tem permissão para alterar este quiz.', 'danger')
            return redirect(url_for('quiz.view', quiz_id=quiz.id))

        return f(*args, **kwargs)

    return decorated_function


def is_safe_next(target):
    """Aceita apenas caminhos locais como destino após o login"""
    return bool(target) and target.startswith('/') and not target.startswith('//')
