import csv
import io

from trilha.models import User, Quiz

from conftest import PASSWORD, login, user_id_for


def test_profile_and_history_pages(app, logged_client, make_quiz):
    quiz_id = make_quiz(user_id_for(app), title='Meu quiz')
    with app.app_context():
        question = Quiz.query.get(quiz_id).get_questions_for_play()[0]
        form = {f'question_{question.id}': str(question.correct_option.id)}
    logged_client.post(f'/quiz/submit/{quiz_id}', data=form)

    profile = logged_client.get('/user/profile').get_data(as_text=True)
    history = logged_client.get('/user/history').get_data(as_text=True)

    assert 'Meu quiz' in profile
    assert 'alice@example.com' in profile
    assert 'Meu quiz' in history
    assert '1/2' in history


def test_edit_profile_requires_current_password(app, logged_client):
    response = logged_client.post('/user/edit_profile', data={
        'display_name': 'Alice Nova', 'current_password': 'errada123'})

    assert 'Senha atual incorreta.' in response.get_data(as_text=True)
    with app.app_context():
        assert User.find_by_email('alice@example.com').display_name == 'Alice'


def test_edit_profile_changes_name_and_password(app, client, logged_client):
    response = logged_client.post('/user/edit_profile', data={
        'display_name': 'Alice Nova',
        'current_password': PASSWORD,
        'new_password': 'novasenha1',
        'confirm_password': 'novasenha1'
    })

    assert response.status_code == 302
    with app.app_context():
        user = User.find_by_email('alice@example.com')
        assert user.display_name == 'Alice Nova'
        assert user.check_password('novasenha1')

    logged_client.get('/auth/logout')
    assert login(client, password=PASSWORD).status_code == 200
    assert login(client, password='novasenha1').status_code == 302


def test_export_attempts_as_csv(app, logged_client, make_quiz, make_attempt):
    user_id = user_id_for(app)
    quiz_id = make_quiz(user_id, title='Exportável', difficulty='intermediate')
    make_attempt(user_id, quiz_id, 50, time_spent=30)

    response = logged_client.get('/user/export')
    rows = list(csv.reader(io.StringIO(response.get_data(as_text=True))))

    assert response.headers['Content-Type'].startswith('text/csv')
    assert rows[0][:4] == ['ID', 'Quiz', 'Dificuldade', 'Nota']
    assert rows[1][1:7] == ['Exportável', 'Intermediário', '50', '1', '2', '30']
