from flask import Blueprint, jsonify, current_app
from nested_backend import db
from nested_backend.errors import ValidationError
from nested_backend.models.contact import Contact
from nested_backend.utils.validators import get_json_body, is_blank
from nested_backend.utils.sanitizers import sanitize_optional

contact_bp = Blueprint('contact', __name__)


@contact_bp.route('/', methods=['POST'], strict_slashes=False)
def submit_contact():
    """Store a contact-form message"""
    data = get_json_body()
    message = data.get('message')

    if is_blank(message) or not isinstance(message, str):
        raise ValidationError('Message is required')

    contact = Contact(
        name=sanitize_optional(data.get('name')),
        email=sanitize_optional(data.get('email')),
        message=message,
    )
    db.session.add(contact)
    db.session.commit()

    current_app.logger.info(f'Contact message stored: {contact.id}')
    return jsonify({
        'message': 'Contact submitted',
        'contact': contact.to_dict()
    }), 201
