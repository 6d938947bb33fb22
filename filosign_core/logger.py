import logging, json, sys, time, os


class WalletContextFilter(logging.Filter):
    """Fill ``ctx`` on records logged without one.

    Call sites pass the shortened wallet address (``0x1234...7890``) as
    ``extra={"ctx": ...}`` so every line can be grouped by wallet without
    writing full addresses to the log.
    """

    def filter(self, record):
        if not hasattr(record, "ctx"):
            record.ctx = "-"
        return True


def get_logger(name="filosign", level=logging.INFO, to_file=None):
    """Structured one-line JSON logger shared by the FiloSign core modules."""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        formatter = logging.Formatter(
            fmt=json.dumps({
                "ts": "%(asctime)s",
                "level": "%(levelname)s",
                "name": "%(name)s",
                "wallet": "%(ctx)s",
                "msg": "%(message)s"
            }),
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )
        formatter.converter = time.gmtime  # UTC timestamps
        handlers = [logging.StreamHandler(sys.stdout)]

        if to_file:
            os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
            handlers.append(logging.FileHandler(to_file))

        for handler in handlers:
            handler.setFormatter(formatter)
            handler.addFilter(WalletContextFilter())
            logger.addHandler(handler)

    return logger
