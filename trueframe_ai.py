from flask import Blueprint, request, jsonify
from werkzeug.exceptions import BadRequest, RequestEntityTooLarge
from datetime import datetime
import logging

from config import Config
from core.analyzer import analyze_request
from core.exceptions import AnalyzerError, ValidationError
from core.rate_limiter import FixedWindowRateLimiter
from utils.samples import get_sample_images
from utils.security import (
    get_client_ip,
    is_oversized_request,
    validate_analysis_payload,
)

logger = logging.getLogger(__name__)

trueframe_ai = Blueprint('trueframe_ai', __name__)

VERSION = '1.0.0'

# Shared by every request in the process; replaceable in tests
rate_limiter = FixedWindowRateLimiter(
    max_requests=Config.RATE_LIMIT_MAX,
    window_seconds=Config.RATE_LIMIT_WINDOW_SECONDS,
    max_buckets=Config.RATE_LIMIT_MAX_BUCKETS,
)

logger.info("=" * 70)
logger.info("🖼️  TrueFrame - Analyzer API Initializing")
logger.info(f"   Rate limit: {Config.RATE_LIMIT_MAX} requests / {Config.RATE_LIMIT_WINDOW_SECONDS:g}s")
logger.info(f"   Upload ceiling: {Config.MAX_UPLOAD_BYTES} bytes, fetch timeout: {Config.FETCH_TIMEOUT_SECONDS:g}s")
logger.info("=" * 70)


def _text_response(message, status, headers=None):
    return message, status, {'Content-Type': 'text/plain; charset=utf-8', **(headers or {})}


@trueframe_ai.route('/analyze', methods=['POST'])
def analyze():
    """
    Analyze an uploaded (dataUrl) or remote (url) image
    Size-gated, rate limited, then validated before the engine runs
    """
    if is_oversized_request(request.content_length, Config.BODY_SIZE_LIMIT):
        return _text_response("Payload too large", 413)

    client_id = get_client_ip()
    decision = rate_limiter.check(client_id)
    if not decision.allowed:
        retry_after = decision.retry_after_seconds or int(Config.RATE_LIMIT_WINDOW_SECONDS)
        response = jsonify({
            'error': 'Rate limit exceeded',
            'message': 'Too many requests. Please try again later.',
            'retryAfterSeconds': retry_after,
        })
        response.status_code = 429
        response.headers['Retry-After'] = str(retry_after)
        return response

    try:
        # Bounded by MAX_CONTENT_LENGTH even when the body is streamed or chunked
        payload = request.get_json(force=True)
    except RequestEntityTooLarge:
        return _text_response("Payload too large", 413)
    except BadRequest:
        return _text_response("Invalid JSON body", 400)

    try:
        analysis_request = validate_analysis_payload(payload)
    except ValidationError as e:
        logger.warning(f"Validation error: {e.message} (field: {e.field})")
        return _text_response(e.message, 400)

    try:
        result = analyze_request(
            analysis_request,
            max_bytes=Config.MAX_UPLOAD_BYTES,
            fetch_timeout=Config.FETCH_TIMEOUT_SECONDS,
        )
    except AnalyzerError as e:
        logger.warning(f"⚠️ Analysis rejected for {client_id}: {type(e).__name__}: {e.message}")
        return _text_response(e.message, e.status_code)
    except Exception as e:
        logger.exception(f"❌ Analysis failed for {client_id}")
        return _text_response(str(e) or "Failed to analyze image", 500)

    return jsonify(result.to_dict())


@trueframe_ai.route('/samples', methods=['GET'])
def samples():
    return jsonify({'samples': [sample.to_dict() for sample in get_sample_images()]})


@trueframe_ai.route('/health', methods=['GET'])
def health_check():
    return jsonify({
        'status': 'healthy',
        'timestamp': datetime.now().isoformat(),
        'version': VERSION,
        'rate_limit': {
            'max_requests': rate_limiter.max_requests,
            'window_seconds': rate_limiter.window_seconds,
        },
    })
