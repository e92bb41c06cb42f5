"""
Main Routes Blueprint

Handles the paginated article list, single articles and standalone pages.
"""

from flask import Blueprint, render_template, abort, current_app

main_bp = Blueprint('main', __name__)


@main_bp.route("/")
def home():
    """Homepage with the first page of articles."""
    return list_page(1)


@main_bp.route("/page/<int:page>/")
def list_page(page):
    """One page of the article listing, newest first."""
    blog_service = current_app.extensions['blog_service']

    pagination = blog_service.paginate_articles(page)
    if pagination is None:
        current_app.logger.warning(f"List page out of range: {page}")
        abort(404)

    return render_template(
        "list.html",
        pagination=pagination,
        heading=None,
    )


@main_bp.route("/<slug>/")
def single(slug):
    """Display a single article, or a standalone page with that slug."""
    blog_service = current_app.extensions['blog_service']
    author_service = current_app.extensions['author_service']

    article = blog_service.get_article(slug)
    if article is None:
        page = blog_service.get_page(slug)
        if page is None:
            current_app.logger.warning(f"Content not found: {slug}")
            abort(404)
        return render_template("page.html", page=page)

    prev_article, next_article = blog_service.get_prev_next_articles(article)
    current_app.logger.info(f"Article accessed: {slug}")

    return render_template(
        "post.html",
        article=article,
        authors=author_service.resolve(article.authors),
        prev_article=prev_article,
        next_article=next_article,
    )
