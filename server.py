import logging

from flask import Flask, jsonify
from flask_cors import CORS

from config import Config

logging.basicConfig(
    level=getattr(logging, str(Config.LOG_LEVEL).upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

from trueframe_ai import trueframe_ai

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = Config.BODY_SIZE_LIMIT

# Public demo endpoint: any origin may call the API
CORS(
    app,
    resources={r"/api/*": {"origins": "*"}},
    send_wildcard=True,
    methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
    max_age=86400,
)

# Quick blueprint registration
blueprints = {
    '/api': trueframe_ai,
}

for prefix, blueprint in blueprints.items():
    app.register_blueprint(blueprint, url_prefix=prefix)

@app.route('/')
def index():
    return jsonify({
        'service': 'TrueFrame',
        'description': 'Check whether media is likely AI-generated, with confidence and explainable signals.',
        'endpoints': ['/api/analyze', '/api/samples', '/api/health'],
    })

if __name__ == '__main__':
    from waitress import serve
    serve(app, host=Config.HOST, port=Config.PORT)
