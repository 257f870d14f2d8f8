"""
Rotas de Usuários - Trilha
==========================

Responsável por:
- Perfil pessoal do usuário
- Edição de nome de exibição e senha
- Histórico de tentativas e exportação em CSV
"""

import csv
import logging
from io import StringIO
from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app, make_response
from flask_login import login_required, current_user
from sqlalchemy.exc import SQLAlchemyError

from trilha.models.attempt import Attempt
from trilha.models.quiz import Quiz
from trilha.utils.helpers import validate_password, validate_display_name

logger = logging.getLogger(__name__)

# Criar blueprint para rotas de usuário
user = Blueprint('user', __name__)


@user.route('/profile')
@login_required
def profile():
    """Perfil do usuário atual"""
    authored = (Quiz.query
                .filter_by(created_by=current_user.id)
                .order_by(Quiz.created_at.desc())
                .limit(5)
                .all())

    return render_template('user/profile.html',
                           stats=current_user.get_quiz_stats(),
                           recent_attempts=current_user.attempts[:5],
                           authored=authored)


@user.route('/edit_profile', methods=['GET', 'POST'])
@login_required
def edit_profile():
    """Editar nome de exibição e senha"""
    if request.method == 'POST':
        db = current_app.extensions['sqlalchemy']

        display_name = request.form.get('display_name', '').strip()
        current_password = request.form.get('current_password', '')
        new_password = request.form.get('new_password', '')
        confirm_password = request.form.get('confirm_password', '')

        errors = []

        if not current_password:
            errors.append('Informe a senha atual para salvar alterações.')
        elif not current_user.check_password(current_password):
            errors.append('Senha atual incorreta.')

        name_error = validate_display_name(display_name)
        if name_error:
            errors.append(name_error + '.')

        # Validar nova senha (se fornecida)
        if new_password:
            if new_password != confirm_password:
                errors.append('As senhas não coincidem.')
            else:
                is_valid, password_message = validate_password(new_password)
                if not is_valid:
                    errors.append(password_message + '.')

        if errors:
            for error in errors:
                flash(error, 'error')
            return render_template('user/edit_profile.html')

        try:
            current_user.display_name = display_name
            if new_password:
                current_user.set_password(new_password)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Erro ao atualizar perfil de %s", current_user.email)
            flash('Erro ao atualizar perfil.', 'error')
            return render_template('user/edit_profile.html')

        flash('Perfil atualizado com sucesso!', 'success')
        return redirect(url_for('user.profile'))

    return render_template('user/edit_profile.html')


@user.route('/history')
@login_required
def history():
    """Todas as tentativas do usuário"""
    return render_template('user/history.html', attempts=current_user.attempts)


@user.route('/export')
@login_required
def export_attempts():
    """Exportar tentativas do usuário (CSV)"""
    output = StringIO()
    writer = csv.writer(output)

    writer.writerow(['ID', 'Quiz', 'Dificuldade', 'Nota', 'Acertos', 'Questões', 'Tempo (s)', 'Concluído em'])

    attempts = (Attempt.query
                .filter_by(user_id=current_user.id)
                .join(Quiz)
                .order_by(Attempt.completed_at.desc(), Attempt.id.desc())
                .all())
    for attempt in attempts:
        writer.writerow([
            attempt.id,
            attempt.quiz.title,
            attempt.quiz.difficulty_label,
            attempt.score,
            attempt.correct_count,
            attempt.total_questions,
            '' if attempt.time_spent is None else attempt.time_spent,
            attempt.completed_at.strftime('%d/%m/%Y %H:%M')
        ])

    response = make_response(output.getvalue())
    response.headers['Content-Type'] = 'text/csv; charset=utf-8'
    response.headers['Content-Disposition'] = 'attachment; filename=tentativas_trilha.csv'

    return response
