import functools
import http.server
import logging
import socketserver
import threading

log = logging.getLogger(__name__)


class _QuietHandler(http.server.SimpleHTTPRequestHandler):
    def log_message(self, format, *args):
        log.debug("%s - %s", self.address_string(), format % args)


class _Server(socketserver.TCPServer):
    allow_reuse_address = True


class StaticServer:
    """Serves ``root`` over HTTP from a background thread."""

    def __init__(self, root, port=8080, host=""):
        self.root = str(root)
        self.port = port
        self.host = host
        self.httpd = None
        self.server_thread = None

    def start(self):
        handler = functools.partial(_QuietHandler, directory=self.root)
        self.httpd = _Server((self.host, self.port), handler)
        # Port 0 binds a free port; report the real one.
        self.port = self.httpd.server_address[1]

        self.server_thread = threading.Thread(target=self.httpd.serve_forever)
        self.server_thread.daemon = True
        self.server_thread.start()
        log.info("> Ready on localhost:%s", self.port)
        return self

    def stop(self):
        if self.httpd:
            log.debug("Shutting down server...")
            self.httpd.shutdown()
            self.httpd.server_close()
            self.httpd = None
        if self.server_thread:
            self.server_thread.join()
            self.server_thread = None

    def __enter__(self):
        return self.start()

    def __exit__(self, *exc):
        self.stop()
