from blueprinter.errors import BlueprinterError

description = "Generates a relative proxy to another server."


def locals(context):
    if not context.args:
        raise BlueprinterError(
            "http-proxy needs the proxy target, e.g. `generate http-proxy foo http://localhost:5000`"
        )
    return {
        "proxy_path": "/" + context.entity.spellings.dash.lstrip("/"),
        "proxy_url": context.args[0],
    }
