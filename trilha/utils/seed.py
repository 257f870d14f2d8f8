"""
Quizzes de exemplo para ambientes de desenvolvimento
"""

import logging
import secrets

from trilha.models.user import User
from trilha.models.quiz import Quiz
from trilha.models.question import Question, Option

logger = logging.getLogger(__name__)

SAMPLE_QUIZZES = [
    {
        'title': 'Python: primeiros passos',
        'description': 'Tipos básicos e operadores.',
        'difficulty': 'beginner',
        'questions': [
            ('Qual é o resultado de 2 ** 3?', 'single_choice', [('6', False), ('8', True), ('9', False)]),
            ('Listas em Python são mutáveis.', 'true_false', [('Verdadeiro', True), ('Falso', False)]),
        ]
    },
    {
        'title': 'Python: coleções',
        'description': 'Dicionários, conjuntos e compreensões.',
        'difficulty': 'intermediate',
        'questions': [
            ('Qual estrutura não permite elementos repetidos?', 'single_choice',
             [('list', False), ('tuple', False), ('set', True)]),
            ('Chaves de dicionário precisam ser hashable.', 'true_false',
             [('Verdadeiro', True), ('Falso', False)]),
        ]
    },
    {
        'title': 'Python: modelo de dados',
        'description': 'Métodos especiais e protocolos.',
        'difficulty': 'advanced',
        'questions': [
            ('Qual método torna um objeto utilizável em um bloco with?', 'single_choice',
             [('__iter__', False), ('__enter__', True), ('__call__', False), ('__len__', False)]),
        ]
    }
]


def seed_sample_quizzes(session, email):
    """
    Cria os quizzes de exemplo que ainda não existem

    Returns:
        int: Quantidade de quizzes criados
    """
    owner = User.find_by_email(email)
    if owner is None:
        owner = User(display_name='Demo', email=email, password=secrets.token_urlsafe(16))
        session.add(owner)
        session.flush()

    created = 0
    for data in SAMPLE_QUIZZES:
        if Quiz.query.filter_by(title=data['title']).first():
            continue

        quiz = Quiz(title=data['title'], description=data['description'],
                    difficulty=data['difficulty'], created_by=owner.id)
        session.add(quiz)

        for index, (prompt, kind, options) in enumerate(data['questions']):
            question = Question(prompt=prompt, kind=kind, order_index=index)
            for position, (text, is_correct) in enumerate(options):
                question.options.append(Option(text=text, is_correct=is_correct, order_index=position))
            quiz.questions.append(question)
        created += 1

    session.commit()
    logger.info("%d quiz(zes) de exemplo criado(s) para %s", created, email)
    return created
