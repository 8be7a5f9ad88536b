# Storefront order service - development entry point
# Run with `flask run` or `python app.py`; configuration comes from FLASK_CONFIG and .env

from storefront import create_app
from storefront.extensions import db

app = create_app()


@app.cli.command('init-db')
def init_db():
    """Create all tables for a fresh local database."""
    db.create_all()
    print('Database tables created.')


if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
