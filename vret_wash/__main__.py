from vret_wash import run

if __name__ == '__main__':
    run()
