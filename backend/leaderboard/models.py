from leaderboard import db
import json
import uuid


def generate_uuid():
    return str(uuid.uuid4())


class Player(db.Model):
    __tablename__ = 'players'
    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    username = db.Column(db.String(20), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(128), nullable=False)
    # Single live bearer token; overwritten on every rotation
    access_token = db.Column(db.String(128), nullable=False)
    team_member = db.Column(db.Integer, nullable=False, default=0)
    achievements = db.Column(db.Text, nullable=False, default='[]')  # JSON-encoded list of ids
    scores = db.relationship('Score', back_populates='player', lazy='dynamic')

    @property
    def achievement_ids(self):
        try:
            return list(json.loads(self.achievements or '[]'))
        except ValueError:
            return []

    def player_info(self):
        return {'teamMember': self.team_member}

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
        }


class Score(db.Model):
    __tablename__ = 'scores'
    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    player_id = db.Column(db.String(36), db.ForeignKey('players.id'), nullable=False, index=True)
    game_mode = db.Column(db.String(32), nullable=False, index=True)
    score = db.Column(db.Integer, nullable=False, default=0)
    death_count = db.Column(db.Integer, nullable=False, default=0)
    timestamp = db.Column(db.BigInteger, nullable=False)  # epoch milliseconds of the last accepted update
    verified = db.Column(db.Integer, nullable=False, default=0)
    player = db.relationship('Player', back_populates='scores')

    __table_args__ = (
        db.UniqueConstraint('player_id', 'game_mode', name='uq_scores_player_mode'),
    )

    def to_dict(self):
        return {
            'username': self.player.username,
            'mode': self.game_mode,
            'score': self.score,
            'deathCount': self.death_count,
            'timestamp': self.timestamp,
            'verified': self.verified,
            'playerInfo': self.player.player_info(),
        }
