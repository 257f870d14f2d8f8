"""
Extensões Flask - Trilha
========================

Instâncias das extensões criadas sem aplicação; cada app criada por
create_app() faz o vínculo com init_app().
"""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate

# Banco de dados
db = SQLAlchemy()

# Migrações do banco
migrate = Migrate()

# Sistema de login
login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.login_message = 'Por favor, faça login para acessar esta página.'
login_manager.login_message_category = 'info'
