import os
from datetime import datetime, timezone
from flask import Blueprint, request, jsonify, current_app
from werkzeug.utils import secure_filename

from soarconv import SoarConverter, ConverterConfig, detect_format
from soarconv.cli import default_output_name
from soarconv.converters import DIRECTION_AUTO, document_stats, parse_document
from soarconv.utils import DIRECTIONS, FormatMismatchError, InvalidDocumentError
from soarconv.version import VERSION

converter_bp = Blueprint('converter', __name__)


def allowed_file(filename):
    """Check if file has allowed extension"""
    return '.' in filename and filename.rsplit('.', 1)[1].lower() == 'json'


def get_converter_config():
    """Converter configuration registered on the app, or the defaults"""
    return current_app.config.get('SOARCONV_CONFIG') or ConverterConfig()


def read_request_document():
    """
    Read the export from an uploaded .json file or the JSON request body.

    Returns (document, filename); raises InvalidDocumentError for bad input.
    """
    if 'file' in request.files:
        file = request.files['file']
        if file.filename == '':
            raise InvalidDocumentError('No file selected')
        if not allowed_file(file.filename):
            raise InvalidDocumentError('Only JSON files are allowed')
        filename = secure_filename(file.filename)
        try:
            text = file.read().decode('utf-8')
        except UnicodeDecodeError as e:
            raise InvalidDocumentError(f'File is not UTF-8 text: {e}') from e
        return parse_document(text), filename

    document = request.get_json(silent=True)
    if document is None:
        raise InvalidDocumentError('Request body must be a JSON export or a multipart .json upload')
    return document, None


@converter_bp.route('/convert', methods=['POST'])
def convert():
    """Convert an FSR or FAS export"""
    direction = request.args.get('direction') or request.form.get('direction') or DIRECTION_AUTO
    if direction != DIRECTION_AUTO and direction not in DIRECTIONS:
        return jsonify({'error': f'Unknown direction: {direction}'}), 400

    try:
        document, filename = read_request_document()

        config = get_converter_config()
        converter = SoarConverter(config)
        resolved = converter.resolve_direction(document, direction)
        result = converter.convert(document, resolved)

        return jsonify({
            'direction': resolved,
            'filename': filename,
            'output_filename': default_output_name(resolved, config.output),
            'stats': document_stats(result, resolved),
            'result': result
        })

    except InvalidDocumentError as e:
        return jsonify({'error': str(e)}), 400
    except FormatMismatchError as e:
        return jsonify({'error': f'Conversion error: {e}'}), 400
    except Exception as e:
        print(f"❌ Conversion failed: {e}")
        return jsonify({'error': f'Conversion failed: {str(e)}'}), 500


@converter_bp.route('/detect', methods=['POST'])
def detect():
    """Detect the export format of an uploaded document"""
    try:
        document, filename = read_request_document()
    except InvalidDocumentError as e:
        return jsonify({'error': str(e)}), 400

    detection = detect_format(document)
    if detection is None:
        return jsonify({'detected': False, 'filename': filename})

    return jsonify({
        'detected': True,
        'filename': filename,
        **detection.to_dict()
    })


@converter_bp.route('/health', methods=['GET'])
def converter_health():
    """Health check endpoint for converter functionality"""
    return jsonify({
        'status': 'healthy',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'service': 'SOAR Playbook Converter',
        'version': VERSION,
        'directions': DIRECTIONS,
        'pid': os.getpid()
    })
