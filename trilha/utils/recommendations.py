"""
Recomendações Personalizadas - Trilha
=====================================

Heurística simples sobre o histórico de tentativas do usuário:
- Nível preferido: dificuldade com a maior média de notas
- Velocidade de aprendizado: segundos médios por questão
- Pontos fracos: quizzes cuja melhor nota ficou abaixo da nota mínima

A recomendação filtra os quizzes do nível preferido, colocando os
ainda não jogados na frente.
"""

import logging
from collections import defaultdict

from trilha.models.attempt import Attempt
from trilha.models.quiz import Quiz, DIFFICULTIES

logger = logging.getLogger(__name__)

DEFAULT_DIFFICULTY = 'beginner'
DEFAULT_PASSING_SCORE = 60


class PersonalizationEngine:
    """Monta o perfil de desempenho e as recomendações de um usuário"""

    def __init__(self, session, passing_score=DEFAULT_PASSING_SCORE):
        self.session = session
        self.passing_score = passing_score

    def _attempts_with_quiz(self, user):
        return (self.session.query(Attempt, Quiz)
                .join(Quiz, Attempt.quiz_id == Quiz.id)
                .filter(Attempt.user_id == user.id)
                .order_by(Attempt.id)
                .all())

    def build_profile(self, user):
        """
        Perfil de desempenho do usuário

        Returns:
            dict: total_attempts, average_score, preferred_difficulty,
                  learning_speed, weak_areas
        """
        rows = self._attempts_with_quiz(user)
        scores = [attempt.score for attempt, _ in rows]

        return {
            'total_attempts': len(rows),
            'average_score': round(sum(scores) / len(scores), 1) if scores else 0,
            'preferred_difficulty': self.preferred_difficulty(rows),
            'learning_speed': self.learning_speed(rows),
            'weak_areas': self.weak_areas(rows)
        }

    @staticmethod
    def preferred_difficulty(rows):
        """Dificuldade com maior média; empate favorece o nível mais fácil"""
        by_difficulty = defaultdict(list)
        for attempt, quiz in rows:
            by_difficulty[quiz.difficulty].append(attempt.score)

        best, best_average = DEFAULT_DIFFICULTY, None
        for difficulty in DIFFICULTIES:
            scores = by_difficulty.get(difficulty)
            if not scores:
                continue
            average = sum(scores) / len(scores)
            if best_average is None or average > best_average:
                best, best_average = difficulty, average
        return best

    @staticmethod
    def learning_speed(rows):
        """Segundos médios por questão, considerando só tentativas cronometradas"""
        seconds = 0
        questions = 0
        for attempt, _ in rows:
            if attempt.time_spent is None or not attempt.total_questions:
                continue
            seconds += attempt.time_spent
            questions += attempt.total_questions

        if not questions:
            return None
        return round(seconds / questions, 1)

    def weak_areas(self, rows):
        """Quizzes com melhor nota abaixo da mínima, piores primeiro"""
        best = {}
        for attempt, quiz in rows:
            current = best.get(quiz.id)
            if current is None or attempt.score > current[1]:
                best[quiz.id] = (quiz, attempt.score)

        weak = [
            {
                'quiz_id': quiz.id,
                'title': quiz.title,
                'difficulty': quiz.difficulty,
                'best_score': score
            }
            for quiz, score in best.values()
            if score < self.passing_score
        ]
        return sorted(weak, key=lambda item: (item['best_score'], item['quiz_id']))

    def recommend(self, user, limit=5, profile=None):
        """
        Quizzes do nível preferido, os ainda não jogados primeiro

        Returns:
            list: Quizzes recomendados (no máximo `limit`)
        """
        if limit is None or limit < 1:
            return []

        profile = profile or self.build_profile(user)
        difficulty = profile['preferred_difficulty']

        attempted = {
            quiz_id for (quiz_id,) in
            self.session.query(Attempt.quiz_id).filter(Attempt.user_id == user.id).distinct()
        }

        candidates = (self.session.query(Quiz)
                      .filter(Quiz.difficulty == difficulty)
                      .order_by(Quiz.id)
                      .all())

        # sorted() é estável: a ordem por id se mantém dentro de cada grupo
        ranked = sorted(candidates, key=lambda quiz: quiz.id in attempted)

        logger.debug("Recomendação para usuário %s: nível %s, %d candidatos",
                     user.id, difficulty, len(candidates))
        return ranked[:limit]
