#!/usr/bin/env python
from mentorfeed.db import Base
from mentorfeed.db.session import LocalSession, engine
from mentorfeed.db.models import FeedbackForm, User
from mentorfeed.app.services.links import issue_session_token

SAMPLE_QUESTIONS = [
    {"id": "q1", "type": "rating", "label": "Overall, how engaged was the mentee?", "required": True, "minRating": 1, "maxRating": 5},
    {"id": "q2", "type": "radio", "label": "Did the mentee reach the session goal?", "required": True, "options": ["Yes", "Partly", "No"]},
    {"id": "q3", "type": "textarea", "label": "What should the mentee focus on next?", "required": False},
]


def get_or_create(db, email, roles, **kwargs):
    obj = db.query(User).filter(User.email == email).first()
    if obj:
        return obj
    obj = User(email=email, **kwargs)
    obj.set_roles(roles)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def main():
    Base.metadata.create_all(bind=engine)
    db = LocalSession()
    try:
        admin = get_or_create(db, "admin@example.com", ["admin"], name="Ada Admin")
        organizer = get_or_create(db, "organizer@example.com", ["organizer"], name="Olga Organizer")
        mentor = get_or_create(db, "mentor@example.com", ["mentor"], name="Max Mentor")
        mentee = get_or_create(db, "mentee@example.com", ["mentee"], name="Mia Mentee", company_name="Acme")

        form = db.query(FeedbackForm).filter(FeedbackForm.created_by_user_id == organizer.user_id).first()
        if not form:
            form = FeedbackForm(name="Session feedback", questions=SAMPLE_QUESTIONS, created_by_user_id=organizer.user_id)
            db.add(form)
            db.commit()

        print("Seeded users (user_id / bearer token):")
        for label, user in (("Admin", admin), ("Organizer", organizer), ("Mentor", mentor), ("Mentee", mentee)):
            print(f"{label + ':':11} {user.user_id}  {issue_session_token(user.user_id)}")
        print(f"Form id:    {form.form_id}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
