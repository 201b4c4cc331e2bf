#!/usr/bin/env python3
"""
Nested Backend Application Runner
"""
import os
from nested_backend import create_app, db
from nested_backend.models import User, Property, PropertyLike, Contact

app = create_app()

@app.shell_context_processor
def make_shell_context():
    return {
        'db': db,
        'User': User,
        'Property': Property,
        'PropertyLike': PropertyLike,
        'Contact': Contact
    }

if __name__ == '__main__':
    port = int(os.getenv('PORT', 5000))
    debug = os.getenv('FLASK_ENV') == 'development'
    app.run(host='0.0.0.0', port=port, debug=debug)
