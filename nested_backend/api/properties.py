from flask import Blueprint, request, jsonify, current_app
from nested_backend import db
from nested_backend.errors import ValidationError, NotFoundError
from nested_backend.models.property import Property
from nested_backend.services.likes import toggle_like
from nested_backend.utils.validators import (
    get_json_body, is_blank, parse_id, parse_optional_number, parse_optional_string, MAX_ID
)

properties_bp = Blueprint('properties', __name__)


def _get_property_or_404(property_id):
    property = db.session.get(Property, property_id)
    if property is None:
        raise NotFoundError('Property not found')
    return property


@properties_bp.route('/', methods=['GET'], strict_slashes=False)
def get_properties():
    """List all properties, or return one when ?id= is given"""
    raw_id = request.args.get('id')
    if raw_id is not None and raw_id != '':
        property = _get_property_or_404(parse_id(raw_id, 'id'))
        return jsonify(property.to_dict()), 200

    properties = Property.query.order_by(Property.id).all()
    return jsonify([p.to_dict() for p in properties]), 200


@properties_bp.route('/<int:property_id>', methods=['GET'])
def get_property(property_id):
    """Get a single property by ID"""
    if property_id > MAX_ID:
        raise NotFoundError('Property not found')
    property = _get_property_or_404(property_id)
    return jsonify(property.to_dict()), 200


@properties_bp.route('/', methods=['POST'], strict_slashes=False)
def create_property():
    """Create a new property listing"""
    data = get_json_body()

    title = parse_optional_string(data.get('title'), 'title')
    if is_blank(title):
        raise ValidationError('Title is required')

    property = Property(
        title=title,
        description=parse_optional_string(data.get('description'), 'description'),
        price=parse_optional_number(data.get('price'), 'price'),
        location=parse_optional_string(data.get('location'), 'location'),
        image=parse_optional_string(data.get('image', data.get('imageUrl')), 'image'),
        address=parse_optional_string(data.get('address'), 'address'),
    )
    db.session.add(property)
    db.session.commit()

    current_app.logger.info(f'Property created: {property.id}')
    return jsonify(property.to_dict()), 201


@properties_bp.route('/like', methods=['POST'])
def toggle_property_like():
    """Toggle a user's like on a property and return the resulting state"""
    data = get_json_body()
    property_id = data.get('propertyId')
    user_id = data.get('userId')

    if is_blank(property_id) or is_blank(user_id):
        raise ValidationError('propertyId and userId are required')

    result = toggle_like(parse_id(property_id, 'propertyId'), parse_id(user_id, 'userId'))
    return jsonify(result), 200
