"""Точка входа в приложение."""
from iconforge.app import IconForgeApp
from iconforge.logging_setup import configure_logging


def main() -> None:
    """Настраивает логирование, создаёт и запускает главное окно."""
    configure_logging()
    app = IconForgeApp()
    app.mainloop()


if __name__ == "__main__":
    main()
