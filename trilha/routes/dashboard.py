"""
Rotas do Dashboard - Trilha
===========================

Página inicial do usuário logado: estatísticas, tentativas recentes e
quizzes recomendados.
"""

from flask import Blueprint, render_template, request, jsonify, current_app
from flask_login import login_required, current_user

from trilha.models.quiz import Quiz
from trilha.utils.recommendations import PersonalizationEngine

dashboard = Blueprint('dashboard', __name__)


def get_engine():
    db = current_app.extensions['sqlalchemy']
    return PersonalizationEngine(db.session, passing_score=current_app.config['PASSING_SCORE'])


@dashboard.route('/')
@login_required
def index():
    """Dashboard do usuário"""
    engine = get_engine()
    profile = engine.build_profile(current_user)
    recommended = engine.recommend(current_user,
                                   limit=current_app.config['RECOMMENDATION_LIMIT'],
                                   profile=profile)

    return render_template('dashboard/index.html',
                           stats=current_user.get_quiz_stats(),
                           profile=profile,
                           recommended=recommended,
                           recent_attempts=current_user.attempts[:5],
                           recent_quizzes=Quiz.get_recent_quizzes())


@dashboard.route('/recommendations')
@login_required
def recommendations():
    """API com o perfil e os quizzes recomendados"""
    limit = request.args.get('limit', current_app.config['RECOMMENDATION_LIMIT'], type=int)

    engine = get_engine()
    profile = engine.build_profile(current_user)
    quizzes = engine.recommend(current_user, limit=limit, profile=profile)

    return jsonify({
        'profile': profile,
        'quizzes': [{
            'id': quiz.id,
            'title': quiz.title,
            'difficulty': quiz.difficulty,
            'question_count': quiz.question_count
        } for quiz in quizzes]
    })
