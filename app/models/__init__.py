"""Import every model module so they register with ``Base.metadata``."""

from app.models import award, contest, group, oj, submission, team, user  # noqa: F401
