import os

from flask import Flask, jsonify

from soarconv import ConfigLoader
from src.routes.converter import converter_bp


def create_app(converter_config=None):
    """Build the Flask app with the converter blueprint registered"""
    app = Flask(__name__)

    app.config['SECRET_KEY'] = os.getenv('SECRET_KEY', 'soarconv-dev-key')
    app.config['MAX_CONTENT_LENGTH'] = 50 * 1024 * 1024  # 50MB max export size

    if converter_config is None:
        converter_config = ConfigLoader.load_or_default(os.getenv('SOARCONV_CONFIG'))
    app.config['SOARCONV_CONFIG'] = converter_config

    app.register_blueprint(converter_bp, url_prefix='/api/converter')

    @app.errorhandler(413)
    def request_too_large(error):
        return jsonify({'error': 'Export exceeds the maximum upload size'}), 413

    return app


app = create_app()


if __name__ == '__main__':
    print("🚀 Starting SOAR Playbook Converter Service...")
    port = int(os.environ.get('PORT', 8000))
    app.run(host='0.0.0.0', port=port, debug=False, threaded=True)
