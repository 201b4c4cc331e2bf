from flask import Blueprint, jsonify, current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from nested_backend import db
from nested_backend.errors import ValidationError, ConflictError, AuthError
from nested_backend.models.user import User
from nested_backend.utils.validators import get_json_body, validate_email
from nested_backend.utils.sanitizers import sanitize_optional

auth_bp = Blueprint('auth', __name__)


def _identity_filter(username, email):
    """Match a user by username OR email, ignoring whichever was not supplied"""
    conditions = []
    if username:
        conditions.append(User.username == username)
    if email:
        conditions.append(User.email == email)
    return or_(*conditions)


def _read_credentials(data):
    username = sanitize_optional(data.get('username'))
    email = sanitize_optional(data.get('email'))
    if email:
        email = email.lower()
    password = data.get('password')
    if not isinstance(password, str):
        password = None
    return username, email, password


@auth_bp.route('/register', methods=['POST'])
def register():
    """Register a new user"""
    data = get_json_body()
    username, email, password = _read_credentials(data)
    name = sanitize_optional(data.get('name'))

    # Validation
    if not password or not (username or email):
        raise ValidationError('Username or email and password are required')

    if email and not validate_email(email):
        raise ValidationError('Invalid email format')

    # Email-only sign-ups use the address as their username
    username = username or email

    if User.query.filter(_identity_filter(username, email)).first():
        raise ConflictError('User already exists')

    user = User(username=username, email=email, name=name)
    user.set_password(password)

    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same username/email
        db.session.rollback()
        raise ConflictError('User already exists')

    current_app.logger.info(f'User registered: {user.id}')
    return jsonify({
        'message': 'User registered',
        'user': user.to_dict()
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """Login user by username or email"""
    data = get_json_body()
    username, email, password = _read_credentials(data)

    if not password or not (username or email):
        raise ValidationError('Email or username and password are required')

    user = User.query.filter(_identity_filter(username, email)).order_by(User.id).first()

    # Same response for unknown user and wrong password
    if not user or not user.check_password(password):
        raise AuthError('Invalid credentials')

    # check_password may have upgraded a legacy plaintext password
    if db.session.is_modified(user):
        db.session.commit()

    return jsonify({
        'message': 'Login successful',
        'user': user.to_dict()
    }), 200
