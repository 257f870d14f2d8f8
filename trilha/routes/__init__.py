"""
Rotas da Trilha
===============
Este módulo contém todas as rotas organizadas por funcionalidade:
- auth: Autenticação (login, cadastro, logout)
- dashboard: Página inicial e recomendações
- quiz: Criar, editar, jogar e excluir quizzes
- user: Perfil e histórico do usuário
"""
from .auth import auth
from .dashboard import dashboard
from .quiz import quiz
from .user import user

# Lista de todos os blueprints disponíveis
__all__ = [
    'auth',
    'dashboard',
    'quiz',
    'user'
]
