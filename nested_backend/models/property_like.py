from nested_backend import db


class PropertyLike(db.Model):
    __tablename__ = 'property_likes'

    id = db.Column(db.Integer, primary_key=True)
    property_id = db.Column(db.Integer, db.ForeignKey('properties.id', ondelete='CASCADE'))
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'))
    # Current state, not a history: false means the user explicitly unliked
    liked = db.Column(db.Boolean, nullable=False, default=True, server_default=db.true())

    # One row per user/property pair
    __table_args__ = (db.UniqueConstraint('property_id', 'user_id', name='uq_property_likes_property_user'),)

    property = db.relationship('Property', backref=db.backref('likes', lazy='dynamic', passive_deletes=True))
    user = db.relationship('User', backref=db.backref('property_likes', lazy='dynamic', passive_deletes=True))

    def __repr__(self):
        return f'<PropertyLike property={self.property_id} user={self.user_id} liked={self.liked}>'
