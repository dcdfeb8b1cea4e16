# ==============================================================================
# WSGI Entry Point - Para Gunicorn / Producción
# ==============================================================================
# USO:
#   gunicorn app_pos.wsgi:app --bind 0.0.0.0:$PORT
#
# Los datos se guardan en POS_DATA_DIR (por defecto app_pos/data/).
# ==============================================================================

from app_pos.main import create_app

app = create_app()

if __name__ == '__main__':
    app.run(debug=False, host='0.0.0.0', port=5000)
