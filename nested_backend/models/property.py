from nested_backend import db


class Property(db.Model):
    __tablename__ = 'properties'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(asdecimal=False), nullable=True)
    location = db.Column(db.String(255), nullable=True)
    image = db.Column(db.Text, nullable=True)
    address = db.Column(db.String(255), nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'price': self.price,
            'location': self.location,
            'image': self.image,
            'address': self.address,
        }

    def __repr__(self):
        return f'<Property {self.title}>'
