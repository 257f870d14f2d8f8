"""
Trilha
======

Plataforma de quizzes com recomendações a partir do histórico de cada
usuário. A aplicação é criada por trilha.app.create_app().
"""

__version__ = '1.0.0'
