"""
Configurações da Trilha
=======================

Valores lidos do ambiente (arquivo .env carregado via python-dotenv).
A única variável de localização do banco é DATABASE_URL.
"""

import os
from dotenv import load_dotenv

# Carregar variáveis de ambiente do arquivo .env
load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _database_url():
    url = os.environ.get('DATABASE_URL') or 'sqlite:///trilha.db'

    # Fix para PostgreSQL em provedores que ainda usam postgres://
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


class Config:
    # Chave secreta para sessões e formulários
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'trilha-dev-secret'

    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(BASE_DIR, 'static', 'uploads')
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB máximo para upload

    # Recomendações e notas
    RECOMMENDATION_LIMIT = int(os.environ.get('RECOMMENDATION_LIMIT', 5))
    PASSING_SCORE = 60

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'trilha-test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    LOG_LEVEL = 'WARNING'
