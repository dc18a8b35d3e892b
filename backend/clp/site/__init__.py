from flask import Blueprint

# Public, tenant-domain routes: landing page, search and preview
site_bp = Blueprint("site", __name__)

from . import landing_page
