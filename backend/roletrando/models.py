from roletrando import db


class Highscore(db.Model):
    __tablename__ = 'highscore'
    # Primary key order is registration order; it breaks ties in the top 3.
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    score = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self):
        return {
            'username': self.username,
            'score': self.score,
        }


class Word(db.Model):
    __tablename__ = 'word'
    id = db.Column(db.Integer, primary_key=True)
    word = db.Column(db.String(64), unique=True, nullable=False)
    tip = db.Column(db.String(256), nullable=False, default='')

    def to_dict(self):
        return {
            'id': self.id,
            'word': self.word,
            'tip': self.tip,
        }
