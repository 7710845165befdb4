import sys

from pickem.db.session import SessionLocal
from pickem.models.user import User
from pickem.core.roles import ALL_ROLES, ROLE_ADMIN

if len(sys.argv) < 2:
    print("usage: make_admin.py EMAIL [ROLE]")
    sys.exit(2)

email = sys.argv[1].lower().strip()
role = sys.argv[2] if len(sys.argv) > 2 else ROLE_ADMIN
if role not in ALL_ROLES:
    print(f"Invalid role. Allowed: {sorted(ALL_ROLES)}")
    sys.exit(2)

db = SessionLocal()
u = db.query(User).filter_by(email=email).first()
if not u:
    print("User not found")
else:
    u.role = role
    db.commit()
    print(f"OK: set {role}")
db.close()
