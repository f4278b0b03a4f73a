from ldfserver.web.blueprints.fragments import blueprint as fragments_blueprint

__all__ = ['fragments_blueprint']
