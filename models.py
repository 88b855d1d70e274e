"""
Database models for the expense tracker.
"""
from datetime import datetime

from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash

from extensions import db


class User(db.Model):
    """User model for authentication."""

    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    username = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    expenses = db.relationship('Expense', back_populates='owner', cascade='all, delete-orphan')

    def set_password(self, password):
        """Hash and set the user's password."""
        method = current_app.config.get('PASSWORD_HASH_METHOD', 'pbkdf2:sha256')
        self.password_hash = generate_password_hash(password, method=method)

    def check_password(self, password):
        """Check if the provided password matches the hash."""
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
        }

    def __repr__(self):
        return f'<User {self.id}: {self.email}>'


class Expense(db.Model):
    """A single expense entry owned by one user."""

    __tablename__ = 'expenses'
    __table_args__ = (
        db.Index('idx_expense_owner_date', 'owner_id', 'date'),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    category = db.Column(db.String(100), nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    owner = db.relationship('User', back_populates='expenses')

    def to_dict(self):
        """Convert expense to dictionary for JSON serialization."""
        if self.date.time() == datetime.min.time():
            date_str = self.date.strftime('%Y-%m-%d')
        else:
            date_str = self.date.isoformat()
        return {
            'id': self.id,
            'ownerId': self.owner_id,
            'category': self.category,
            'amount': float(self.amount),
            'title': self.title,
            'date': date_str,
        }

    def __repr__(self):
        return f'<Expense {self.id}: {self.title} {self.amount}>'
