"""
Taxonomy Routes Blueprint

Category, tag and author listing pages.
"""

from flask import Blueprint, render_template, abort, current_app

taxonomy_bp = Blueprint('taxonomy', __name__)


@taxonomy_bp.route("/categories/<category>/", defaults={'page': 1})
@taxonomy_bp.route("/categories/<category>/page/<int:page>/")
def category(category, page):
    """Articles in one category."""
    blog_service = current_app.extensions['blog_service']

    name = blog_service.category_name(category)
    if name is None:
        current_app.logger.warning(f"Category not found: {category}")
        abort(404)

    pagination = blog_service.paginate_articles(
        page,
        articles=blog_service.by_category(name),
        base_path=f"/categories/{category}/",
    )
    if pagination is None:
        abort(404)

    current_app.logger.info(f"Category '{name}' accessed - page {page}")
    return render_template("list.html", pagination=pagination, heading=name)


@taxonomy_bp.route("/tags/<tag>/", defaults={'page': 1})
@taxonomy_bp.route("/tags/<tag>/page/<int:page>/")
def tag(tag, page):
    """Articles with one tag."""
    blog_service = current_app.extensions['blog_service']

    name = blog_service.tag_name(tag)
    if name is None:
        current_app.logger.warning(f"Tag not found: {tag}")
        abort(404)

    pagination = blog_service.paginate_articles(
        page,
        articles=blog_service.by_tag(name),
        base_path=f"/tags/{tag}/",
    )
    if pagination is None:
        abort(404)

    return render_template("list.html", pagination=pagination, heading=f"#{name}")


@taxonomy_bp.route("/authors/<key>/")
def author(key):
    """Author profile with their articles."""
    blog_service = current_app.extensions['blog_service']
    author_service = current_app.extensions['author_service']

    articles = blog_service.by_author(key)
    author = author_service.get(key)
    if author is None and not articles:
        current_app.logger.warning(f"Author not found: {key}")
        abort(404)

    return render_template("author.html", author=author, author_key=key, articles=articles)
