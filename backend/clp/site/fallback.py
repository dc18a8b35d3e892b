from flask import g, render_template


def homepage_index(*, search: bool = False):
    """
    The regular marketplace homepage, served when no landing page is
    released (and for search once one is).
    """
    return render_template(
        "fallback/homepage.html",
        tenant=g.current_tenant,
        search=search,
    )
