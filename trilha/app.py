import os
import logging
import click
from flask import Flask, render_template, redirect, url_for, flash, request
from flask_login import current_user

from trilha.config import Config
from trilha.extensions import db, migrate, login_manager

logger = logging.getLogger(__name__)


def configure_logging(app):
    """Formato único de log para a aplicação inteira"""
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logging.getLogger('trilha').setLevel(level)
    app.logger.setLevel(level)


def create_app(config_object=None, **overrides):
    """Cria e configura uma aplicação Trilha"""
    app = Flask(__name__)

    # ================================
    # CONFIGURAÇÕES
    # ================================
    app.config.from_object(config_object or Config)
    app.config.update(overrides)

    configure_logging(app)

    # ================================
    # INICIALIZAR EXTENSÕES
    # ================================
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    from trilha.models import User

    # Função necessária para o Flask-Login carregar usuários
    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    # ================================
    # REGISTRAR ROTAS
    # ================================
    from trilha.routes import auth, dashboard, quiz, user

    app.register_blueprint(auth, url_prefix='/auth')
    app.register_blueprint(dashboard, url_prefix='/dashboard')
    app.register_blueprint(quiz, url_prefix='/quiz')
    app.register_blueprint(user, url_prefix='/user')

    @app.route('/')
    def index():
        """Página inicial - redireciona conforme login"""
        if current_user.is_authenticated:
            return redirect(url_for('dashboard.index'))
        return redirect(url_for('auth.login'))

    register_template_helpers(app)
    register_error_handlers(app)
    register_commands(app)

    # ================================
    # INICIALIZAÇÃO DO BANCO
    # ================================
    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    with app.app_context():
        db.create_all()

    logger.info("Trilha inicializada (banco: %s)", app.config['SQLALCHEMY_DATABASE_URI'])
    return app


def register_template_helpers(app):
    from trilha.models.quiz import DIFFICULTY_LABELS
    from trilha.utils.helpers import format_datetime, format_time_ago, truncate_text

    app.add_template_filter(format_datetime, 'datetime')
    app.add_template_filter(format_time_ago, 'time_ago')
    app.add_template_filter(truncate_text, 'truncate_words')

    @app.context_processor
    def inject_global_vars():
        """Disponibiliza variáveis em todos os templates"""
        return {
            'app_name': 'Trilha',
            'difficulty_labels': DIFFICULTY_LABELS
        }


def register_error_handlers(app):
    @app.errorhandler(404)
    def not_found(error):
        return render_template('errors/404.html'), 404

    @app.errorhandler(413)
    def too_large(error):
        flash('Arquivo muito grande. O limite é de 16MB.', 'error')
        return redirect(request.referrer or url_for('index'))


def register_commands(app):
    @app.cli.command('seed-quizzes')
    @click.option('--email', default='demo@trilha.dev', help='Conta dona dos quizzes de exemplo.')
    def seed_quizzes(email):
        """Cria quizzes de exemplo, um por dificuldade"""
        from trilha.utils.seed import seed_sample_quizzes

        created = seed_sample_quizzes(db.session, email)
        click.echo(f"{created} quiz(zes) de exemplo criado(s).")


if __name__ == '__main__':
    application = create_app()
    debug_mode = os.environ.get('FLASK_ENV') == 'development'

    application.run(
        debug=debug_mode,
        host='0.0.0.0',  # Permite acesso externo
        port=int(os.environ.get('PORT', 5000))  # Porta flexível para deploy
    )
