from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from clp.caching.response_cache import LandingPageCache

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
landing_page_cache = LandingPageCache()
