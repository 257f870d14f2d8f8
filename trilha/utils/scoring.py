"""
Cálculo de Pontuação - Trilha
=============================

A nota de uma tentativa é a fração de questões respondidas com a
alternativa correta, em escala de 0 a 100, sem crédito parcial.
Uma alternativa só vale se pertencer à própria questão.
"""


def parse_selections(form, questions):
    """
    Lê as escolhas enviadas no formulário (campos question_<id>)

    Returns:
        dict: {question_id: option_id ou None}
    """
    selections = {}
    for question in questions:
        raw = form.get(f'question_{question.id}')
        try:
            selections[question.id] = int(raw) if raw not in (None, '') else None
        except (TypeError, ValueError):
            selections[question.id] = None
    return selections


def grade_answers(questions, selections):
    """
    Corrige cada questão

    Args:
        questions (list): Questões do quiz
        selections (dict): {question_id: option_id ou None}

    Returns:
        list: tuplas (question, option ou None, is_correct), uma por questão
    """
    graded = []
    for question in questions:
        option = question.find_option(selections.get(question.id))
        graded.append((question, option, bool(option and option.is_correct)))
    return graded


def score_percentage(correct, total):
    """Converte acertos em nota de 0 a 100"""
    if total <= 0:
        return 0
    return round(100 * correct / total)


def calculate_score(questions, selections):
    """
    Calcula a nota de uma tentativa

    Returns:
        dict: score, correct_count, total_questions e as respostas corrigidas
    """
    graded = grade_answers(questions, selections)
    correct = sum(1 for _, _, is_correct in graded if is_correct)

    return {
        'score': score_percentage(correct, len(graded)),
        'correct_count': correct,
        'total_questions': len(graded),
        'graded': graded
    }
