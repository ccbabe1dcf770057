from flask import Blueprint

bp = Blueprint('api', __name__, url_prefix='/api')

from opportunityhub.api import routes
