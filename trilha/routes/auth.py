"""
Rotas de Autenticação - Trilha
==============================

Responsável por:
- Cadastro de contas
- Login por email e senha
- Logout
"""

import logging
from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app
from flask_login import login_user, logout_user, login_required, current_user
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from trilha.models.user import User
from trilha.utils.decorators import anonymous_required, is_safe_next
from trilha.utils.helpers import validate_email, validate_password, validate_display_name

logger = logging.getLogger(__name__)

# Criar blueprint para rotas de autenticação
auth = Blueprint('auth', __name__)

# Mensagem única para email desconhecido ou senha errada
INVALID_CREDENTIALS = 'E-mail ou senha inválidos.'


@auth.route('/login', methods=['GET', 'POST'])
@anonymous_required
def login():
    """Página de login"""
    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')
        remember = bool(request.form.get('remember'))

        # Validações básicas
        if not email or not password:
            flash('Por favor, preencha todos os campos.', 'error')
            return render_template('auth/login.html', email=email)

        user = User.authenticate(email, password)

        if user:
            login_user(user, remember=remember)
            logger.info("Login bem-sucedido: %s", user.email)

            # Redirecionar para página solicitada ou dashboard
            next_page = request.args.get('next')
            flash(f'Bem-vindo, {user.display_name}!', 'success')
            if is_safe_next(next_page):
                return redirect(next_page)
            return redirect(url_for('dashboard.index'))

        logger.warning("Falha de login para %s", email)
        flash(INVALID_CREDENTIALS, 'error')
        return render_template('auth/login.html', email=email)

    return render_template('auth/login.html')


@auth.route('/register', methods=['GET', 'POST'])
@anonymous_required
def register():
    """Página de cadastro"""
    if request.method == 'POST':
        db = current_app.extensions['sqlalchemy']

        # Obter dados do formulário
        display_name = request.form.get('display_name', '').strip()
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')
        confirm_password = request.form.get('confirm_password', '')

        errors = []

        if not all([display_name, email, password, confirm_password]):
            errors.append('Todos os campos obrigatórios devem ser preenchidos.')

        if display_name:
            name_error = validate_display_name(display_name)
            if name_error:
                errors.append(name_error + '.')

        if email:
            if not validate_email(email):
                errors.append('Formato de email inválido.')
            elif User.find_by_email(email):
                errors.append('Este email já está cadastrado.')

        if password:
            is_valid, password_message = validate_password(password)
            if not is_valid:
                errors.append(password_message + '.')

        if password != confirm_password:
            errors.append('As senhas não coincidem.')

        # Se há erros, mostrar na página
        if errors:
            for error in errors:
                flash(error, 'error')
            return render_template('auth/register.html', display_name=display_name, email=email)

        try:
            new_user = User(display_name=display_name, email=email, password=password)
            db.session.add(new_user)
            db.session.commit()
        except IntegrityError:
            # Cadastro concorrente com o mesmo email
            db.session.rollback()
            flash('Este email já está cadastrado.', 'error')
            return render_template('auth/register.html', display_name=display_name, email=email)
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Erro no cadastro de %s", email)
            flash('Erro interno. Tente novamente mais tarde.', 'error')
            return render_template('auth/register.html', display_name=display_name, email=email)

        logger.info("Nova conta cadastrada: %s", email)
        flash('Cadastro realizado com sucesso! Faça login para continuar.', 'success')
        return redirect(url_for('auth.login'))

    return render_template('auth/register.html')


@auth.route('/logout')
@login_required
def logout():
    """Logout do usuário"""
    user_name = current_user.display_name
    logout_user()
    flash(f'Até logo, {user_name}!', 'info')
    return redirect(url_for('auth.login'))
