from expense_bot.bot import main

main()
