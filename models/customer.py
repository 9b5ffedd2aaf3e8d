from models.db import db

class Customer(db.Model):
    __tablename__ = "customers"

    id = db.Column(db.Integer, primary_key=True)

    # Matched on (name, phone) when a booking is created
    customer_name = db.Column(db.String(120), nullable=False, index=True)
    phone = db.Column(db.String(30), nullable=False, index=True)

    email = db.Column(db.String(255), nullable=True)
    address = db.Column(db.String(255), nullable=True)
    tax_id = db.Column(db.String(30), nullable=True)
