"""
Funções Auxiliares - Trilha
===========================

Funções utilitárias para:
- Upload e gerenciamento de imagens de capa
- Validação de dados de conta, quiz e questões
- Formatação de datas e texto
"""

import os
import re
import uuid
import logging
from datetime import datetime
from PIL import Image, UnidentifiedImageError
from flask import current_app

from trilha.models.quiz import DIFFICULTIES, DIFFICULTY_LABELS
from trilha.models.question import OPTION_LIMITS, QUESTION_KINDS

logger = logging.getLogger(__name__)

# Extensões de arquivo permitidas
ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
MAX_IMAGE_SIZE = (1920, 1080)  # Redimensionar imagens grandes


def allowed_file(filename):
    """
    Verifica se o arquivo tem extensão permitida

    Args:
        filename (str): Nome do arquivo

    Returns:
        bool: True se permitido, False caso contrário
    """
    if not filename:
        return False

    return ('.' in filename and
            filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS)


def generate_filename():
    """Gera nome único para a imagem (sempre salva como JPEG)"""
    return f"{uuid.uuid4()}.jpg"


def save_uploaded_file(file, upload_folder=None):
    """
    Salva imagem enviada, já otimizada

    Args:
        file: Arquivo do FormData
        upload_folder (str): Pasta de destino (opcional)

    Returns:
        str: Nome do arquivo salvo ou None se inválido
    """
    if not file or not file.filename:
        return None

    if not allowed_file(file.filename):
        return None

    if not upload_folder:
        upload_folder = current_app.config['UPLOAD_FOLDER']

    os.makedirs(upload_folder, exist_ok=True)

    filename = generate_filename()
    filepath = os.path.join(upload_folder, filename)

    try:
        optimize_image(file.stream, filepath)
    except (UnidentifiedImageError, OSError):
        logger.warning("Imagem inválida descartada: %s", file.filename)
        if os.path.exists(filepath):
            os.remove(filepath)
        return None

    return filename


def optimize_image(source, filepath):
    """
    Redimensiona e comprime a imagem, gravando em JPEG

    Args:
        source: Caminho ou stream da imagem original
        filepath (str): Caminho de destino
    """
    with Image.open(source) as img:
        # Converter para RGB se necessário
        if img.mode != 'RGB':
            img = img.convert('RGB')

        # Redimensionar se muito grande
        if img.size[0] > MAX_IMAGE_SIZE[0] or img.size[1] > MAX_IMAGE_SIZE[1]:
            img.thumbnail(MAX_IMAGE_SIZE, Image.Resampling.LANCZOS)

        img.save(filepath, 'JPEG', quality=85, optimize=True)


def delete_file(filename, upload_folder=None):
    """
    Remove arquivo do sistema

    Returns:
        bool: True se removido, False caso contrário
    """
    if not filename:
        return False

    if not upload_folder:
        upload_folder = current_app.config['UPLOAD_FOLDER']

    filepath = os.path.join(upload_folder, os.path.basename(filename))

    try:
        if os.path.exists(filepath):
            os.remove(filepath)
            return True
    except OSError:
        logger.exception("Erro ao remover arquivo %s", filepath)

    return False


def format_datetime(dt, format_type='full'):
    """
    Formata data/hora para exibição

    Args:
        dt (datetime): Data/hora
        format_type (str): 'full', 'date', 'time', 'short'
    """
    if not dt:
        return 'Data não informada'

    if format_type == 'full':
        return dt.strftime('%d/%m/%Y às %H:%M')
    elif format_type == 'date':
        return dt.strftime('%d/%m/%Y')
    elif format_type == 'time':
        return dt.strftime('%H:%M')
    elif format_type == 'short':
        return dt.strftime('%d/%m às %H:%M')
    else:
        return str(dt)


def format_time_ago(dt, now=None):
    """Formata tempo relativo (ex: "há 2 horas")"""
    if not dt:
        return 'Data desconhecida'

    now = now or datetime.utcnow()
    diff = now - dt

    if diff.days > 30:
        return format_datetime(dt, 'date')
    elif diff.days > 0:
        return f"há {diff.days} dia{'s' if diff.days > 1 else ''}"
    elif diff.seconds >= 3600:
        hours = diff.seconds // 3600
        return f"há {hours} hora{'s' if hours > 1 else ''}"
    elif diff.seconds >= 60:
        minutes = diff.seconds // 60
        return f"há {minutes} minuto{'s' if minutes > 1 else ''}"
    else:
        return "agora mesmo"


def truncate_text(text, max_length=100, suffix='...'):
    """Trunca texto mantendo palavras inteiras"""
    if not text or len(text) <= max_length:
        return text or ''

    truncated = text[:max_length].rsplit(' ', 1)[0]
    return truncated + suffix


def escape_like(term, escape='\\'):
    """Escapa % e _ digitados pelo usuário para uso literal em LIKE"""
    return (term.replace(escape, escape * 2)
                .replace('%', escape + '%')
                .replace('_', escape + '_'))


def validate_email(email):
    """
    Valida formato de email

    Returns:
        bool: True se válido, False caso contrário
    """
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return re.match(pattern, email) is not None


def validate_password(password):
    """
    Valida força da senha

    Returns:
        tuple: (bool, str) - (é_válida, mensagem)
    """
    if not password:
        return False, "Senha é obrigatória"

    if len(password) < 6:
        return False, "Senha deve ter pelo menos 6 caracteres"

    if len(password) > 128:
        return False, "Senha muito longa"

    has_letter = any(c.isalpha() for c in password)
    has_number = any(c.isdigit() for c in password)

    if not has_letter:
        return False, "Senha deve conter pelo menos uma letra"

    if not has_number:
        return False, "Senha deve conter pelo menos um número"

    return True, "Senha válida"


def validate_display_name(display_name):
    """Retorna mensagem de erro ou None"""
    if not display_name:
        return "Nome de exibição é obrigatório"
    if len(display_name) < 2:
        return "Nome de exibição deve ter pelo menos 2 caracteres"
    if len(display_name) > 80:
        return "Nome de exibição muito longo (máximo 80 caracteres)"
    return None


def validate_difficulty(value):
    """Retorna mensagem de erro ou None"""
    if value not in DIFFICULTIES:
        allowed = ', '.join(DIFFICULTY_LABELS[d] for d in DIFFICULTIES)
        return f"Dificuldade inválida. Use uma destas: {allowed}"
    return None


def validate_quiz_data(data):
    """
    Valida dados de criação/edição de quiz

    Args:
        data (dict): title, description, difficulty

    Returns:
        tuple: (bool, list) - (é_válido, lista_de_erros)
    """
    errors = []

    # Título
    title = (data.get('title') or '').strip()
    if not title:
        errors.append("Título é obrigatório")
    elif len(title) < 3:
        errors.append("Título deve ter pelo menos 3 caracteres")
    elif len(title) > 200:
        errors.append("Título muito longo (máximo 200 caracteres)")

    # Descrição (opcional)
    description = (data.get('description') or '').strip()
    if description and len(description) > 1000:
        errors.append("Descrição muito longa (máximo 1000 caracteres)")

    difficulty_error = validate_difficulty(data.get('difficulty'))
    if difficulty_error:
        errors.append(difficulty_error)

    return len(errors) == 0, errors


def validate_question_data(data, position=None):
    """
    Valida uma questão no formato
    {'prompt': str, 'kind': str, 'options': [{'text': str, 'is_correct': bool}]}

    Returns:
        tuple: (bool, list) - (é_válido, lista_de_erros)
    """
    errors = []
    label = f"Questão {position}: " if position is not None else ""

    if not isinstance(data, dict):
        return False, [f"{label}formato inválido"]

    prompt = str(data.get('prompt') or '').strip()
    if not prompt:
        errors.append(f"{label}texto da questão é obrigatório")
    elif len(prompt) > 2000:
        errors.append(f"{label}questão muito longa (máximo 2000 caracteres)")

    kind = data.get('kind') or 'single_choice'
    if kind not in QUESTION_KINDS:
        errors.append(f"{label}tipo de questão inválido")
        return False, errors

    options = data.get('options')
    if not isinstance(options, list):
        errors.append(f"{label}alternativas ausentes")
        return False, errors

    texts = [str(o.get('text') or '').strip() if isinstance(o, dict) else '' for o in options]
    minimum, maximum = OPTION_LIMITS[kind]

    if any(not text for text in texts):
        errors.append(f"{label}todas as alternativas precisam de texto")
    if any(len(text) > 500 for text in texts):
        errors.append(f"{label}alternativa muito longa (máximo 500 caracteres)")
    if not minimum <= len(options) <= maximum:
        if minimum == maximum:
            errors.append(f"{label}este tipo exige exatamente {minimum} alternativas")
        else:
            errors.append(f"{label}informe entre {minimum} e {maximum} alternativas")

    correct = sum(1 for o in options if isinstance(o, dict) and o.get('is_correct'))
    if correct != 1:
        errors.append(f"{label}marque exatamente uma alternativa correta")

    return len(errors) == 0, errors


def normalize_question_data(data):
    """Retorna cópia limpa de uma questão já validada"""
    return {
        'prompt': str(data['prompt']).strip(),
        'kind': data.get('kind') or 'single_choice',
        'options': [
            {'text': str(o['text']).strip(), 'is_correct': bool(o.get('is_correct'))}
            for o in data['options']
        ]
    }


def question_from_form(form):
    """Monta o dicionário de questão a partir de um formulário simples"""
    texts = form.getlist('option_text')
    correct = form.get('correct_option', type=int)

    # Campos de alternativa deixados em branco são ignorados
    return {
        'prompt': form.get('prompt', ''),
        'kind': form.get('kind', 'single_choice'),
        'options': [
            {'text': text, 'is_correct': index == correct}
            for index, text in enumerate(texts)
            if text.strip()
        ]
    }
