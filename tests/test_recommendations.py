import json

from trilha.extensions import db
from trilha.models import User, Quiz, Attempt
from trilha.utils.recommendations import PersonalizationEngine

from conftest import register, login, quiz_form, user_id_for


def engine_for(app):
    return PersonalizationEngine(db.session, passing_score=app.config['PASSING_SCORE'])


def test_profile_without_attempts_falls_back_to_beginner(app, make_user):
    user_id = make_user()

    with app.app_context():
        profile = engine_for(app).build_profile(db.session.get(User, user_id))

    assert profile == {
        'total_attempts': 0,
        'average_score': 0,
        'preferred_difficulty': 'beginner',
        'learning_speed': None,
        'weak_areas': []
    }


def test_recommend_without_attempts_returns_beginner_quizzes(app, make_user, make_quiz):
    author = make_user('autor@example.com', 'Autor')
    user_id = make_user()
    beginner_id = make_quiz(author, 'Básico', 'beginner')
    make_quiz(author, 'Avançado', 'advanced')

    with app.app_context():
        quizzes = engine_for(app).recommend(db.session.get(User, user_id))

    assert [quiz.id for quiz in quizzes] == [beginner_id]


def test_only_beginner_history_recommends_only_beginner_capped(app, make_user, make_quiz, make_attempt):
    author = make_user('autor@example.com', 'Autor')
    user_id = make_user()
    beginner_ids = [make_quiz(author, f'Básico {i}', 'beginner') for i in range(4)]
    make_quiz(author, 'Médio', 'intermediate')
    make_quiz(author, 'Avançado', 'advanced')
    make_attempt(user_id, beginner_ids[0], 50)

    with app.app_context():
        quizzes = engine_for(app).recommend(db.session.get(User, user_id), limit=2)
        difficulties = {quiz.difficulty for quiz in quizzes}
        ids = [quiz.id for quiz in quizzes]

    assert difficulties == {'beginner'}
    assert len(ids) == 2
    # Quiz já jogado vai para o fim da fila
    assert ids == beginner_ids[1:3]


def test_attempted_quizzes_are_still_recommended_after_new_ones(app, make_user, make_quiz, make_attempt):
    author = make_user('autor@example.com', 'Autor')
    user_id = make_user()
    first = make_quiz(author, 'Básico 1', 'beginner')
    second = make_quiz(author, 'Básico 2', 'beginner')
    make_attempt(user_id, first, 100)

    with app.app_context():
        ids = [quiz.id for quiz in engine_for(app).recommend(db.session.get(User, user_id), limit=5)]

    assert ids == [second, first]


def test_preferred_difficulty_is_highest_average(app, make_user, make_quiz, make_attempt):
    author = make_user('autor@example.com', 'Autor')
    user_id = make_user()
    beginner = make_quiz(author, 'Básico', 'beginner')
    advanced = make_quiz(author, 'Avançado', 'advanced')
    make_attempt(user_id, beginner, 40)
    make_attempt(user_id, beginner, 60)
    make_attempt(user_id, advanced, 90)

    with app.app_context():
        profile = engine_for(app).build_profile(db.session.get(User, user_id))

    assert profile['preferred_difficulty'] == 'advanced'
    assert profile['total_attempts'] == 3
    assert profile['average_score'] == 63.3


def test_tie_prefers_easier_difficulty(app, make_user, make_quiz, make_attempt):
    author = make_user('autor@example.com', 'Autor')
    user_id = make_user()
    make_attempt(user_id, make_quiz(author, 'Avançado', 'advanced'), 80)
    make_attempt(user_id, make_quiz(author, 'Médio', 'intermediate'), 80)

    with app.app_context():
        profile = engine_for(app).build_profile(db.session.get(User, user_id))

    assert profile['preferred_difficulty'] == 'intermediate'


def test_learning_speed_and_weak_areas(app, make_user, make_quiz, make_attempt):
    author = make_user('autor@example.com', 'Autor')
    user_id = make_user()
    weak = make_quiz(author, 'Difícil', 'beginner')
    weaker = make_quiz(author, 'Mais difícil', 'beginner')
    strong = make_quiz(author, 'Tranquilo', 'beginner')
    make_attempt(user_id, weak, 20, time_spent=40, total_questions=2)
    make_attempt(user_id, weak, 50, time_spent=20, total_questions=2)
    make_attempt(user_id, weaker, 0)
    make_attempt(user_id, strong, 100)

    with app.app_context():
        profile = engine_for(app).build_profile(db.session.get(User, user_id))

    # 60 segundos em 4 questões cronometradas
    assert profile['learning_speed'] == 15.0
    assert [(area['quiz_id'], area['best_score']) for area in profile['weak_areas']] == [(weaker, 0), (weak, 50)]


def test_limit_below_one_returns_nothing(app, make_user, make_quiz):
    user_id = make_user()
    make_quiz(user_id)

    with app.app_context():
        user = db.session.get(User, user_id)
        assert engine_for(app).recommend(user, limit=0) == []


def test_end_to_end_alice_beginner_quiz(app, client):
    register(client, email='alice@example.com', display_name='alice')
    login(client, email='alice@example.com')

    client.post('/quiz/create', data=quiz_form(title='Primeiro quiz', difficulty='beginner'))
    client.post('/quiz/create', data=quiz_form(title='Quiz avançado', difficulty='advanced'))

    with app.app_context():
        quiz = Quiz.query.filter_by(title='Primeiro quiz').one()
        quiz_id = quiz.id
        form = {f'question_{q.id}': str(q.correct_option.id) for q in quiz.get_questions_for_play()}

    client.get(f'/quiz/play/{quiz_id}')
    client.post(f'/quiz/submit/{quiz_id}', data=form)

    with app.app_context():
        attempt = Attempt.query.filter_by(user_id=user_id_for(app)).one()
        assert attempt.score == 100
        assert len(attempt.answers) == 2

    response = client.get('/dashboard/recommendations')
    data = json.loads(response.get_data(as_text=True))

    assert response.status_code == 200
    assert data['profile']['preferred_difficulty'] == 'beginner'
    assert data['profile']['total_attempts'] == 1
    assert [q['difficulty'] for q in data['quizzes']] == ['beginner']
    assert data['quizzes'][0]['id'] == quiz_id

    dashboard = client.get('/dashboard/').get_data(as_text=True)
    assert 'Primeiro quiz' in dashboard


def test_recommendations_endpoint_respects_limit(app, client, make_quiz):
    register(client)
    login(client)
    owner = user_id_for(app)
    for index in range(3):
        make_quiz(owner, f'Básico {index}', 'beginner')

    data = client.get('/dashboard/recommendations?limit=2').get_json()

    assert len(data['quizzes']) == 2
