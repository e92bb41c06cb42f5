"""
Feed Routes Blueprint

RSS feed, the JSON search index and the web app manifest: the home page outputs.
"""

from flask import Blueprint, render_template, jsonify, current_app, make_response

feeds_bp = Blueprint('feeds', __name__)


@feeds_bp.route("/index.xml")
def rss():
    """RSS 2.0 feed of the most recent articles."""
    blog_service = current_app.extensions['blog_service']
    articles = blog_service.recent(current_app.config['RSS_LIMIT'])

    response = make_response(render_template("rss.xml", articles=articles))
    response.headers['Content-Type'] = 'application/rss+xml; charset=utf-8'
    return response


@feeds_bp.route("/index.json")
def search_index():
    """Search index consumed by the client-side search box."""
    blog_service = current_app.extensions['blog_service']
    image_service = current_app.extensions['image_service']

    entries = []
    for article in blog_service.list_articles():
        entries.append({
            'title': article.title,
            'url': image_service.absolute_url(article.url, current_app.config['BASE_URL']),
            'date': article.date.isoformat(),
            'categories': article.categories,
            'summary': blog_service.summary(article),
        })
    return jsonify(entries)


@feeds_bp.route("/index.webmanifest")
def web_manifest():
    """Web app manifest so the site can be installed to a home screen."""
    config = current_app.config

    response = jsonify({
        'name': config['SITE_TITLE'],
        'short_name': config['SITE_SHORT_NAME'],
        'description': config['SITE_DESCRIPTION'],
        'lang': config['LANGUAGE_CODE'],
        'start_url': '/',
        'scope': '/',
        'display': 'standalone',
        'theme_color': config['THEME_COLOR'],
        'background_color': config['BACKGROUND_COLOR'],
        'icons': config['MANIFEST_ICONS'],
    })
    response.headers['Content-Type'] = 'application/manifest+json'
    return response
