import logging

from telegram.ext import Application

from gallery.app import GalleryApp
from gallery.bot.telegram_bot import attach_handlers, bind_gallery
from runner.config import DATA_DIR, LOG_LEVEL, PAGE_SIZE, TELEGRAM_TOKEN


def main():
    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO),
                        format="%(asctime)s | %(levelname)s | %(message)s")
    # httpx logs every getUpdates poll at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    # 1) Load gallery state from disk (or seed it)
    gallery = GalleryApp.from_data_dir(DATA_DIR)

    # 2) Build bot
    application = Application.builder().token(TELEGRAM_TOKEN).build()

    # 3) Handlers + shared state
    bind_gallery(application, gallery, page_size=PAGE_SIZE)
    attach_handlers(application)

    print("Bot running. Ctrl+C to stop.")
    application.run_polling(close_loop=False)


if __name__ == "__main__":
    main()
