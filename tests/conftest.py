import json

import pytest

from trilha.app import create_app
from trilha.config import TestingConfig
from trilha.extensions import db as _db
from trilha.models import User, Quiz, Question, Option, Attempt

PASSWORD = 'segredo123'


@pytest.fixture
def app(tmp_path):
    app = create_app(TestingConfig, UPLOAD_FOLDER=str(tmp_path / 'uploads'))

    yield app

    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


def register(client, email='alice@example.com', display_name='Alice', password=PASSWORD, confirm=None):
    return client.post('/auth/register', data={
        'display_name': display_name,
        'email': email,
        'password': password,
        'confirm_password': password if confirm is None else confirm
    })


def login(client, email='alice@example.com', password=PASSWORD):
    return client.post('/auth/login', data={'email': email, 'password': password})


def question_payload(prompt='2 + 2 = ?', correct='4', wrong=('3', '5'), kind='single_choice'):
    options = [{'text': correct, 'is_correct': True}]
    options += [{'text': text, 'is_correct': False} for text in wrong]
    return {'prompt': prompt, 'kind': kind, 'options': options}


def quiz_form(title='Aritmética', difficulty='beginner', questions=None, description='Contas simples'):
    if questions is None:
        questions = [question_payload(), question_payload('3 + 3 = ?', '6', ('5', '7'))]
    return {
        'title': title,
        'description': description,
        'difficulty': difficulty,
        'questions_data': json.dumps(questions)
    }


@pytest.fixture
def logged_client(client):
    register(client)
    login(client)
    return client


@pytest.fixture
def make_user(app):
    """Cria conta direto no banco e retorna o id"""
    def factory(email='bob@example.com', display_name='Bob'):
        with app.app_context():
            user = User(display_name=display_name, email=email, password=PASSWORD)
            _db.session.add(user)
            _db.session.commit()
            return user.id
    return factory


@pytest.fixture
def make_quiz(app):
    """Cria quiz com `size` questões de 2 alternativas (a primeira correta) e retorna o id"""
    def factory(owner_id, title='Quiz', difficulty='beginner', size=2):
        with app.app_context():
            quiz = Quiz(title=title, difficulty=difficulty, created_by=owner_id)
            _db.session.add(quiz)
            for index in range(size):
                question = Question(prompt=f'Pergunta {index + 1}', kind='single_choice', order_index=index)
                question.options.append(Option(text='certa', is_correct=True, order_index=0))
                question.options.append(Option(text='errada', is_correct=False, order_index=1))
                quiz.questions.append(question)
            _db.session.commit()
            return quiz.id
    return factory


@pytest.fixture
def make_attempt(app):
    def factory(user_id, quiz_id, score, time_spent=None, total_questions=2):
        with app.app_context():
            attempt = Attempt(user_id=user_id, quiz_id=quiz_id, score=score,
                              correct_count=round(score * total_questions / 100),
                              total_questions=total_questions, time_spent=time_spent)
            _db.session.add(attempt)
            _db.session.commit()
            return attempt.id
    return factory


def user_id_for(app, email='alice@example.com'):
    with app.app_context():
        return User.find_by_email(email).id
