"""
Rotas de Quiz - Trilha
======================

Responsável por:
- Criar novos quizzes com imagem de capa
- Editar e excluir quizzes (apenas o autor)
- Listar, visualizar e jogar quizzes
- Sistema de pontuação e resultados
"""

import json
import logging
from datetime import datetime
from flask import Blueprint, render_template, request, redirect, url_for, flash, session, current_app, abort
from flask_login import login_required, current_user
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError

from trilha.models.quiz import Quiz, DIFFICULTIES, DIFFICULTY_LABELS
from trilha.models.question import Question, Option, QUESTION_KINDS, QUESTION_KIND_LABELS
from trilha.models.attempt import Attempt, Answer
from trilha.utils.decorators import quiz_owner_required
from trilha.utils.helpers import (
    save_uploaded_file, delete_file, validate_quiz_data, validate_question_data,
    validate_difficulty, normalize_question_data, question_from_form, escape_like
)
from trilha.utils.scoring import calculate_score, parse_selections

logger = logging.getLogger(__name__)

# Criar blueprint para rotas de quiz
quiz = Blueprint('quiz', __name__)


def game_key(quiz_id):
    return f'quiz_game_{quiz_id}'


def build_question(data, order_index):
    """Cria a questão e suas alternativas a partir de dados já validados"""
    question = Question(prompt=data['prompt'], kind=data['kind'], order_index=order_index)
    for index, option in enumerate(data['options']):
        question.options.append(Option(text=option['text'], is_correct=option['is_correct'],
                                       order_index=index))
    return question


def parse_questions_payload(raw):
    """
    Lê e valida o JSON de questões enviado pelo formulário de criação

    Returns:
        tuple: (lista de questões normalizadas, lista de erros)
    """
    if not raw:
        return [], ['Adicione pelo menos uma questão ao quiz.']

    try:
        questions_data = json.loads(raw)
    except json.JSONDecodeError:
        return [], ['Erro no formato das questões.']

    if not isinstance(questions_data, list) or not questions_data:
        return [], ['Adicione pelo menos uma questão ao quiz.']

    errors = []
    for position, question_data in enumerate(questions_data, 1):
        _, question_errors = validate_question_data(question_data, position)
        errors.extend(question_errors)

    if errors:
        return [], errors
    return [normalize_question_data(q) for q in questions_data], []


def form_context(**extra):
    context = {
        'difficulties': DIFFICULTIES,
        'difficulty_labels': DIFFICULTY_LABELS,
        'question_kinds': QUESTION_KINDS,
        'question_kind_labels': QUESTION_KIND_LABELS
    }
    context.update(extra)
    return context


@quiz.route('/')
@login_required
def list_quizzes():
    """Lista de quizzes com filtro por dificuldade e busca"""
    difficulty = request.args.get('difficulty', '').strip()
    search = request.args.get('search', '').strip()

    query = Quiz.query

    if difficulty:
        if validate_difficulty(difficulty):
            flash('Dificuldade inválida no filtro.', 'warning')
            difficulty = ''
        else:
            query = query.filter_by(difficulty=difficulty)

    if search:
        query = query.filter(Quiz.title.ilike(f'%{escape_like(search)}%', escape='\\'))

    quizzes = query.order_by(desc(Quiz.created_at), desc(Quiz.id)).all()

    return render_template('quiz/list.html', **form_context(
        quizzes=quizzes, current_difficulty=difficulty, search_term=search))


@quiz.route('/create', methods=['GET', 'POST'])
@login_required
def create():
    """Criar novo quiz"""
    if request.method == 'GET':
        return render_template('quiz/create.html', **form_context(form={}))

    db = current_app.extensions['sqlalchemy']

    form = {
        'title': request.form.get('title', '').strip(),
        'description': request.form.get('description', '').strip(),
        'difficulty': request.form.get('difficulty', '').strip(),
        'questions_data': request.form.get('questions_data', '')
    }

    _, errors = validate_quiz_data(form)
    questions, question_errors = parse_questions_payload(form['questions_data'])
    errors.extend(question_errors)

    if errors:
        for error in errors:
            flash(error, 'error')
        return render_template('quiz/create.html', **form_context(form=form))

    # Processar imagem do quiz
    image_filename = None
    file = request.files.get('quiz_image')
    if file and file.filename:
        image_filename = save_uploaded_file(file)
        if not image_filename:
            flash('Imagem inválida. Use PNG, JPG, JPEG, GIF ou WEBP. O quiz foi salvo sem imagem.', 'warning')

    new_quiz = Quiz(
        title=form['title'],
        description=form['description'] or None,
        difficulty=form['difficulty'],
        image_filename=image_filename,
        created_by=current_user.id
    )

    # Quiz, questões e alternativas gravados numa única transação
    try:
        db.session.add(new_quiz)
        for index, question_data in enumerate(questions):
            new_quiz.questions.append(build_question(question_data, index))
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        delete_file(image_filename)
        logger.exception("Erro ao criar quiz '%s'", form['title'])
        flash('Erro ao criar quiz. Tente novamente.', 'error')
        return render_template('quiz/create.html', **form_context(form=form))

    logger.info("Quiz %s criado por %s com %d questões", new_quiz.id, current_user.email, len(questions))
    flash('Quiz criado com sucesso!', 'success')
    return redirect(url_for('quiz.view', quiz_id=new_quiz.id))


@quiz.route('/edit/<int:quiz_id>', methods=['GET', 'POST'])
@login_required
@quiz_owner_required
def edit(quiz_id):
    """Editar dados do quiz"""
    quiz_obj = Quiz.query.get_or_404(quiz_id)

    if request.method == 'POST':
        db = current_app.extensions['sqlalchemy']

        data = {
            'title': request.form.get('title', '').strip(),
            'description': request.form.get('description', '').strip(),
            'difficulty': request.form.get('difficulty', '').strip()
        }

        is_valid, errors = validate_quiz_data(data)
        if not is_valid:
            for error in errors:
                flash(error, 'error')
            return render_template('quiz/edit.html', **form_context(quiz=quiz_obj))

        old_image = new_image = None
        try:
            quiz_obj.title = data['title']
            quiz_obj.description = data['description'] or None
            quiz_obj.difficulty = data['difficulty']
            quiz_obj.updated_at = datetime.utcnow()

            # Processar nova imagem se enviada
            file = request.files.get('quiz_image')
            if file and file.filename:
                new_image = save_uploaded_file(file)
                if new_image:
                    old_image = quiz_obj.image_filename
                    quiz_obj.image_filename = new_image
                else:
                    flash('Imagem inválida, a anterior foi mantida.', 'warning')

            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            delete_file(new_image)
            logger.exception("Erro ao atualizar quiz %s", quiz_id)
            flash('Erro ao atualizar quiz.', 'error')
            return render_template('quiz/edit.html', **form_context(quiz=quiz_obj))

        delete_file(old_image)
        logger.info("Quiz %s atualizado", quiz_id)
        flash('Quiz atualizado com sucesso!', 'success')
        return redirect(url_for('quiz.edit', quiz_id=quiz_id))

    return render_template('quiz/edit.html', **form_context(quiz=quiz_obj))


@quiz.route('/<int:quiz_id>/questions', methods=['POST'])
@login_required
@quiz_owner_required
def add_question(quiz_id):
    """Adicionar questão a um quiz existente"""
    db = current_app.extensions['sqlalchemy']
    quiz_obj = Quiz.query.get_or_404(quiz_id)

    data = question_from_form(request.form)
    is_valid, errors = validate_question_data(data)
    if not is_valid:
        for error in errors:
            flash(error, 'error')
        return redirect(url_for('quiz.edit', quiz_id=quiz_id))

    try:
        question = build_question(normalize_question_data(data), Question.get_next_order_index(quiz_id))
        quiz_obj.questions.append(question)
        quiz_obj.updated_at = datetime.utcnow()
        db.session.commit()
        flash('Questão adicionada com sucesso!', 'success')
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Erro ao adicionar questão ao quiz %s", quiz_id)
        flash('Erro ao adicionar questão.', 'error')

    return redirect(url_for('quiz.edit', quiz_id=quiz_id))


@quiz.route('/delete_question/<int:question_id>', methods=['POST'])
@login_required
def delete_question(question_id):
    """Excluir questão"""
    db = current_app.extensions['sqlalchemy']

    question = Question.query.filter_by(id=question_id, is_active=True).first_or_404()
    quiz_obj = question.quiz

    # Verificar permissão
    if not quiz_obj.is_owned_by(current_user):
        flash('Você não tem permissão para excluir esta questão.', 'danger')
        return redirect(url_for('quiz.view', quiz_id=quiz_obj.id))

    if quiz_obj.question_count <= 1:
        flash('O quiz precisa ter pelo menos uma questão.', 'warning')
        return redirect(url_for('quiz.edit', quiz_id=quiz_obj.id))

    try:
        question.soft_delete()
        quiz_obj.updated_at = datetime.utcnow()
        db.session.commit()
        flash('Questão excluída com sucesso!', 'success')
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Erro ao excluir questão %s", question_id)
        flash('Erro ao excluir questão.', 'error')

    return redirect(url_for('quiz.edit', quiz_id=quiz_obj.id))


@quiz.route('/delete/<int:quiz_id>', methods=['POST'])
@login_required
@quiz_owner_required
def delete(quiz_id):
    """Excluir quiz com questões e tentativas"""
    db = current_app.extensions['sqlalchemy']
    quiz_obj = Quiz.query.get_or_404(quiz_id)
    image_filename = quiz_obj.image_filename

    try:
        db.session.delete(quiz_obj)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Erro ao excluir quiz %s", quiz_id)
        flash('Erro ao excluir quiz.', 'error')
        return redirect(url_for('quiz.view', quiz_id=quiz_id))

    delete_file(image_filename)
    logger.info("Quiz %s excluído por %s", quiz_id, current_user.email)
    flash('Quiz excluído com sucesso!', 'success')
    return redirect(url_for('quiz.list_quizzes'))


@quiz.route('/view/<int:quiz_id>')
@login_required
def view(quiz_id):
    """Visualizar detalhes do quiz"""
    quiz_obj = Quiz.query.get_or_404(quiz_id)

    return render_template('quiz/view.html',
                           quiz=quiz_obj,
                           stats=quiz_obj.get_completion_stats(),
                           attempts=quiz_obj.get_user_attempts(current_user),
                           is_owner=quiz_obj.is_owned_by(current_user))


@quiz.route('/play/<int:quiz_id>')
@login_required
def play(quiz_id):
    """Iniciar jogo do quiz"""
    quiz_obj = Quiz.query.get_or_404(quiz_id)
    questions = quiz_obj.get_questions_for_play()

    if not questions:
        flash('Este quiz não possui questões.', 'warning')
        return redirect(url_for('quiz.view', quiz_id=quiz_id))

    # Início do jogo fica na sessão para calcular o tempo gasto
    session[game_key(quiz_id)] = {'start_time': datetime.utcnow().isoformat()}

    return render_template('quiz/play.html',
                           quiz=quiz_obj,
                           questions=questions,
                           total_questions=len(questions))


@quiz.route('/submit/<int:quiz_id>', methods=['POST'])
@login_required
def submit(quiz_id):
    """Corrigir respostas e salvar a tentativa"""
    db = current_app.extensions['sqlalchemy']
    quiz_obj = Quiz.query.get_or_404(quiz_id)
    questions = quiz_obj.get_questions_for_play()

    if not questions:
        flash('Este quiz não possui questões.', 'warning')
        return redirect(url_for('quiz.view', quiz_id=quiz_id))

    result = calculate_score(questions, parse_selections(request.form, questions))

    # Calcular tempo gasto
    time_spent = None
    game_data = session.pop(game_key(quiz_id), None)
    if game_data and game_data.get('start_time'):
        start_time = datetime.fromisoformat(game_data['start_time'])
        time_spent = max(0, int((datetime.utcnow() - start_time).total_seconds()))

    attempt = Attempt(
        user_id=current_user.id,
        quiz=quiz_obj,
        score=result['score'],
        correct_count=result['correct_count'],
        total_questions=result['total_questions'],
        time_spent=time_spent
    )
    for question, option, is_correct in result['graded']:
        attempt.answers.append(Answer(question=question, option=option, is_correct=is_correct))

    # Tentativa e respostas gravadas numa única transação
    try:
        db.session.add(attempt)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Erro ao salvar tentativa do quiz %s", quiz_id)
        flash('Erro ao salvar resultado.', 'error')
        return redirect(url_for('quiz.view', quiz_id=quiz_id))

    logger.info("Tentativa %s salva: usuário %s, quiz %s, nota %s",
                attempt.id, current_user.id, quiz_id, attempt.score)
    flash('Quiz concluído! Resultado salvo com sucesso.', 'success')
    return redirect(url_for('quiz.result', attempt_id=attempt.id))


@quiz.route('/result/<int:attempt_id>')
@login_required
def result(attempt_id):
    """Mostrar resultado da tentativa"""
    attempt = Attempt.query.get_or_404(attempt_id)

    # Apenas o dono da tentativa
    if attempt.user_id != current_user.id:
        abort(404)

    answers = sorted(attempt.answers, key=lambda a: (a.question.order_index, a.question_id))
    return render_template('quiz/result.html', attempt=attempt, answers=answers)
