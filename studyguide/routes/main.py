"""Main page Blueprint"""
from flask import Blueprint, render_template

from studyguide.services.api_response import success_response

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    """Lecture notes form and study guide viewer"""
    return render_template('index.html')


@main_bp.route('/health')
def health():
    return success_response(data={'status': 'ok'})
