import hmac
import bcrypt
from flask import current_app
from nested_backend import db


def _is_bcrypt_hash(value):
    return bool(value) and value.startswith(('$2a$', '$2b$', '$2y$')) and len(value) == 60


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(255), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=True)
    password_hash = db.Column('password', db.String(255), nullable=False)
    name = db.Column(db.String(255), nullable=True)

    def set_password(self, password):
        """Hash and set user password"""
        salt = bcrypt.gensalt(rounds=current_app.config.get('BCRYPT_ROUNDS', 12))
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

    def check_password(self, password):
        """Check if provided password matches the stored value.

        Rows carried over from the legacy deployment hold the password
        verbatim. Those only match when PASSWORD_PLAINTEXT_FALLBACK is on,
        and are rehashed on the first successful check.
        """
        if not self.password_hash:
            return False

        if _is_bcrypt_hash(self.password_hash):
            return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))

        if not current_app.config.get('PASSWORD_PLAINTEXT_FALLBACK'):
            return False

        if hmac.compare_digest(self.password_hash.encode('utf-8'), password.encode('utf-8')):
            self.set_password(password)
            return True
        return False

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'name': self.name,
        }

    def __repr__(self):
        return f'<User {self.username}>'
