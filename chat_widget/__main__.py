from chat_widget.gui.panel import main

main()
