from app.sitescope.db.models import Profile


class ProfileRepository:
    def __init__(self, db):
        self.db = db

    def get_by_id(self, profile_id: str):
        return self.db.get(Profile, profile_id)
