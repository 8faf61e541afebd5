from infoq_clean_pdf.cli import main

if __name__ == "__main__":
    main()
